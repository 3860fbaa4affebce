import os
from typing import List, Tuple

from .models import ToolpathGenerationParams


def get_input_files(input_dir: str = "input") -> List[str]:
    """Get list of available parameter files."""
    if not os.path.exists(input_dir):
        return []

    files = sorted(f for f in os.listdir(input_dir) if f.endswith('.json'))
    return files


def select_input_file() -> str:
    """Prompt user to select a parameter file."""
    files = get_input_files()

    if not files:
        print("No parameter files found in the 'input' directory.")
        print("Please add a .json file with your facing parameters.")
        raise SystemExit(1)

    print("Available parameter files:")
    for i, file in enumerate(files, 1):
        print(f"{i}. {file}")

    while True:
        try:
            choice = int(input(f"\nSelect file (1-{len(files)}): ")) - 1
            if 0 <= choice < len(files):
                return os.path.join("input", files[choice])
            else:
                print(f"Please enter a number between 1 and {len(files)}")
        except ValueError:
            print("Please enter a valid number")


def get_int_input(prompt: str, default: int = None) -> int:
    while True:
        try:
            if default is not None:
                user_input = input(f"{prompt} (default: {default}): ").strip()
                if not user_input:
                    return default
            else:
                user_input = input(f"{prompt}: ").strip()

            return int(user_input)
        except ValueError:
            print("Please enter a valid number")


def get_machine_settings(default_tool: int = 0, default_workplace: int = 1) -> Tuple[int, int]:
    """Prompt for the tool number and work coordinate system."""
    print("\n=== Machine Settings ===")
    tool_number = get_int_input("Tool number", default_tool)
    while True:
        workplace = get_int_input("Work coordinate system (1=G54 ... 6=G59)", default_workplace)
        if 1 <= workplace <= 6:
            return tool_number, workplace
        print("Please enter a number between 1 and 6")


def display_summary(input_file: str, params: ToolpathGenerationParams, tool_number: int,
                    workplace: int, output_file: str) -> bool:
    """Display a summary of the operation."""
    stock = params.stock
    cutting = params.cutting
    pattern = params.pattern
    feeds = params.feeds

    print(f"\n=== Operation Summary ===")
    print(f"Parameter file: {input_file}")
    print(f"G-code file: {output_file}")

    print(f"\nStock:")
    if stock.is_circular:
        print(f"  Circular, diameter {stock.size_x} mm")
    else:
        print(f"  Rectangular, {stock.size_x} x {stock.size_y} mm")
    print(f"  Origin: {stock.origin_position}")

    print(f"\nCutting Parameters:")
    print(f"  Tool: T{tool_number}, diameter {cutting.tool_diameter} mm")
    print(f"  Stepover: {cutting.stepover}%")
    print(f"  Stepdown: {cutting.stepdown} mm")
    print(f"  Total depth: {cutting.total_depth} mm")
    print(f"  Safe Z: {cutting.safe_z_height} mm above stock top")
    if cutting.finishing_pass:
        print(f"  Finishing pass: {cutting.finishing_pass_height} mm")

    print(f"\nPattern: {pattern.type} at {pattern.angle}°, {pattern.milling_direction}")
    if pattern.type == 'spiral':
        print(f"  Spiral direction: {pattern.spiral_direction}")
    print(f"Feeds: XY {feeds.xy} mm/min, Z {feeds.z} mm/min, spindle {feeds.spindle_speed} RPM")
    print(f"Work coordinates: G{53 + workplace}")

    confirm = input("\nProceed with G-code generation? (y/n): ").lower().strip()
    return confirm in ['y', 'yes']
