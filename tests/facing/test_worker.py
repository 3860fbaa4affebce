"""Tests for facing/worker.py."""
import pytest

from facing.worker import GENERATION_PROGRESS_SPAN, handle_worker_request


@pytest.fixture
def run(sample_payload):
    """Run a request and collect the posted messages."""
    def _run(request=None, **kwargs):
        messages = []
        if request is None:
            request = {'type': 'generate', 'params': sample_payload}
        handle_worker_request(request, messages.append, **kwargs)
        return messages
    return _run


class TestHandleWorkerRequest:
    """Tests for the generate request protocol."""

    def test_message_sequence(self, run):
        messages = run()
        types = [message['type'] for message in messages]
        assert types[-1] == 'complete'
        assert set(types[:-1]) == {'progress'}
        assert messages[0]['progress'] == 0
        assert messages[-2] == {'type': 'progress', 'progress': 100, 'message': 'Generation complete'}

    def test_complete_payload(self, run):
        complete = run()[-1]
        assert complete['cancelled'] is False
        assert len(complete['toolpath']) == 2
        assert complete['toolpath'][0][0]['type'] == 'rapid'
        assert complete['statistics']['roughing_passes'] == 2
        assert complete['statistics']['material_removed'] == pytest.approx(60.0 * 40.0 * 2.0)

    def test_generator_progress_scaled(self, run):
        messages = run()
        index = next(i for i, m in enumerate(messages) if m['message'] == 'Calculating statistics...')
        progress = [m['progress'] for m in messages[:index + 1]]
        assert progress == sorted(progress)
        assert max(progress) == GENERATION_PROGRESS_SPAN

    def test_unknown_request_type(self, run):
        messages = run({'type': 'explode'})
        assert messages == [{'type': 'error', 'error': 'Unknown worker request type: explode'}]

    def test_not_a_dict(self, run):
        assert run('generate')[0]['type'] == 'error'

    def test_validation_errors_joined(self, run, sample_payload):
        sample_payload['cutting']['toolRadius'] = 0
        sample_payload['feeds']['xy'] = 0
        messages = run({'type': 'generate', 'params': sample_payload})
        assert len(messages) == 1
        assert messages[0]['type'] == 'error'
        assert "Tool radius must be positive; " in messages[0]['error']
        assert "Horizontal feed rate must be positive" in messages[0]['error']

    def test_parse_error_reported(self, run, sample_payload):
        del sample_payload['feeds']
        messages = run({'type': 'generate', 'params': sample_payload})
        assert messages[-1]['type'] == 'error'
        assert "feeds" in messages[-1]['error']

    def test_cancelled_before_start(self, run):
        messages = run(should_abort=lambda: True)
        complete = messages[-1]
        assert complete['type'] == 'complete'
        assert complete['cancelled'] is True
        assert complete['toolpath'] == []
        assert messages[-2]['message'] == 'Generation cancelled'

    def test_cancelled_after_first_level(self, sample_payload):
        """Levels finished before the abort are kept."""
        messages = []

        def should_abort():
            return any(
                m['type'] == 'progress' and m['progress'] >= GENERATION_PROGRESS_SPAN / 2
                for m in messages
            )

        request = {'type': 'generate', 'params': sample_payload}
        handle_worker_request(request, messages.append, should_abort=should_abort)
        complete = messages[-1]
        assert complete['cancelled'] is True
        assert len(complete['toolpath']) == 1
        assert complete['statistics']['roughing_passes'] == 1

    def test_debug_hook(self, run):
        lines = []
        run(on_debug=lines.append)
        assert all(isinstance(line, str) for line in lines)
