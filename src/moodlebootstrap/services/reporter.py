"""End-of-run summary for moodle-bootstrap."""

from rich.markup import escape
from rich.table import Table

from moodlebootstrap.models import BootstrapOutcome, OutputStyle, StepStatus

_STATUS_COLORS = {
    StepStatus.SUCCEEDED: "green",
    StepStatus.SKIPPED: "cyan",
    StepStatus.FAILED_TOLERATED: "yellow",
    StepStatus.FAILED: "red",
    StepStatus.NOT_RUN: "dim",
}


class Reporter:
    """Prints per-step outcomes and the effective configuration."""

    def __init__(self, console, style: OutputStyle):
        self.console = console
        self.style = style

    def report(self, outcome: BootstrapOutcome):
        table = Table(title="Bootstrap summary", show_lines=False)
        table.add_column("Step")
        table.add_column("Status")
        table.add_column("Detail", overflow="fold")

        for step in outcome.ordered_steps():
            table.add_row(
                step.state.value,
                self.style.paint(step.status.value, _STATUS_COLORS[step.status]),
                self.style.paint(step.detail or "", "dim"),
            )
        self.console.print(table)

        if outcome.is_fatal:
            self.console.print(
                f"{self.style.paint('FATAL', 'bold red')} in {outcome.fatal_state.value}: "
                f"{self.style.paint(outcome.fatal_error or '', 'red')}"
            )
        else:
            config = outcome.config
            self.console.print(
                f"{self.style.paint('Local environment started', 'green')}. Changes made in "
                f"{self.style.paint(config.code_path, 'blue')} will be reflected live at "
                f"{self.style.paint(f'http://localhost:{config.web_port}', 'blue')}"
            )

        self.console.print(self.style.paint("Parsed/used parameter values:", "red"))
        if outcome.config is None:
            self.console.print("- <unavailable: validation did not complete>")
            return

        for name, value in self.parameter_rows(outcome):
            self.console.print(f"- {name}: {escape(value)}")

    @staticmethod
    def parameter_rows(outcome: BootstrapOutcome):
        config = outcome.config
        timeout = "unbounded" if config.db_wait_timeout is None else f"{config.db_wait_timeout:g}s"
        return [
            ("install", str(int(config.run_install))),
            ("code_path", config.code_path),
            ("webport", str(config.web_port)),
            ("dbengine", config.db_engine),
            ("dbport", "" if config.db_port is None else str(config.db_port)),
            ("project", config.project),
            ("vncport", "" if config.vnc_port is None else str(config.vnc_port)),
            ("docker_path", config.docker_path),
            ("db_timeout", timeout),
        ]
