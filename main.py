#!/usr/bin/env python3

import os
import sys
from facing.params_parser import load_params_file, ParseError
from facing.gcode_generator import generate_gcode
from facing.statistics import calculate_toolpath_statistics
from facing.toolpath_generator import generate_toolpath
from facing.user_interface import select_input_file, get_machine_settings, display_summary
from facing.utils.gcode_format import sanitize_program_name
from facing.utils.validators import validate_generation_params, get_parameter_warnings
from facing.visualizer import plot_toolpath_preview, save_plot_preview


def main():
    """Main application entry point."""
    print("=== Facing Toolpath Generator ===")
    print("Generate facing G-code from JSON parameter files\n")

    os.makedirs("output", exist_ok=True)

    while True:  # Loop to allow retry on parse errors
        try:
            input_file = select_input_file()
            print(f"\nSelected parameter file: {input_file}")

            print("Parsing parameter file...")
            params = load_params_file(input_file)

            errors = validate_generation_params(params)
            if errors:
                print("\n❌ ERROR: Invalid facing parameters:")
                for error in errors:
                    print(f"- {error}")
                sys.exit(1)

            for warning in get_parameter_warnings(params):
                print(f"⚠️  {warning}")

            break

        except ParseError as e:
            print(f"\n❌ ERROR: Problem with parameter file:")
            print(f"{str(e)}")
            print(f"\nPlease fix the parameter file and try again.")

            retry = input("\nWould you like to select a different file or retry? (y/n): ").lower().strip()
            if retry not in ['y', 'yes']:
                print("Exiting...")
                sys.exit(1)
            continue

    tool_number, workplace = get_machine_settings()

    base_name = sanitize_program_name(os.path.splitext(os.path.basename(input_file))[0])
    output_file = os.path.join("output", f"{base_name}.gcode")

    if not display_summary(input_file, params, tool_number, workplace, output_file):
        print("Operation cancelled.")
        return

    try:
        print("\nGenerating toolpath...")
        toolpath = generate_toolpath(params)
        gcode = generate_gcode(toolpath, params, tool_number, workplace)
    except ValueError as e:
        print(f"\n❌ Error generating G-code: {str(e)}")
        sys.exit(1)

    with open(output_file, 'w') as f:
        f.write(gcode)
    print(f"✅ G-code generated: {output_file}")

    stats = calculate_toolpath_statistics(toolpath, params)
    print(f"\nLevels: {stats.roughing_passes} roughing"
          f"{' + finishing' if stats.finishing_pass else ''}")
    print(f"Cutting distance: {stats.cutting_distance:.1f} mm")
    print(f"Rapid distance: {stats.rapid_distance:.1f} mm")
    print(f"Estimated time: {stats.estimated_time:.1f} min")
    print(f"Material removed: {stats.material_removed / 1000:.2f} cm³")

    show_plot = input("\nWould you like to see a visual preview of the toolpath? (y/n): ").lower().strip()
    if show_plot in ['y', 'yes']:
        print("Generating visual preview...")
        plot_filename = save_plot_preview(toolpath, params, base_name)
        print(f"Plot saved to: {plot_filename}")
        plot_toolpath_preview(toolpath, params)

    show_gcode_preview = input("\nWould you like to see a preview of the generated G-code text? (y/n): ").lower().strip()
    if show_gcode_preview in ['y', 'yes']:
        lines = gcode.split('\n')
        print(f"\n--- G-code Preview (first 20 lines) ---")
        for i, line in enumerate(lines[:20]):
            print(f"{i+1:2d}: {line}")
        if len(lines) > 20:
            print(f"... ({len(lines) - 20} more lines)")
        print()


if __name__ == "__main__":
    main()
