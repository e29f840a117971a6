import io

from moodlebootstrap.models import BootstrapOutcome, BootstrapState, OutputStyle, StepStatus


class FakeTty(io.StringIO):
    def isatty(self):
        return True


def test_output_style_detects_terminal():
    assert OutputStyle.detect(environ={}, stream=FakeTty()).color is True
    assert OutputStyle.detect(environ={}, stream=io.StringIO()).color is False


def test_output_style_respects_opt_outs():
    assert OutputStyle.detect(no_color=True, environ={}, stream=FakeTty()).color is False
    assert OutputStyle.detect(environ={"NO_COLOR": "1"}, stream=FakeTty()).color is False
    assert OutputStyle.detect(environ={"TERM": "dumb"}, stream=FakeTty()).color is False


def test_output_style_paint():
    assert OutputStyle(color=True).paint("ok", "green") == "[green]ok[/green]"
    assert OutputStyle(color=False).paint("ok", "green") == "ok"


def test_outcome_starts_with_every_step_not_run():
    outcome = BootstrapOutcome()

    assert [step.status for step in outcome.ordered_steps()] == [StepStatus.NOT_RUN] * 6
    assert outcome.exit_code == 0


def test_outcome_fatal_sets_exit_code():
    outcome = BootstrapOutcome()
    outcome.record_fatal(BootstrapState.STARTING, "boom")

    assert outcome.is_fatal
    assert outcome.status_of(BootstrapState.STARTING) == StepStatus.FAILED
    assert outcome.exit_code == 1
