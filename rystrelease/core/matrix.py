"""Cargo build matrix — build, lint, test and clean over (feature, crate) pairs.

Planning is pure: ``plan_task`` turns a task and a ``MatrixConfig`` into the
ordered list of steps.  ``MatrixRunner`` executes a plan one step at a
time, echoing each command, and stops at the first non-zero exit.

Iteration is feature-major: every crate is visited for the first feature
flag before moving to the next flag.  Lint refuses to start unless the
release version check passes.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from rystrelease.core.errors import CommandFailedError
from rystrelease.core.version_checker import VersionChecker
from rystrelease.models.matrix import (
    INTEGRATION_CRATE,
    NO_DEFAULT_FEATURES,
    SUCCESS_BANNERS,
    CargoInvocation,
    LockfileRemoval,
    MatrixConfig,
    MatrixTask,
)
from rystrelease.models.reports import VersionReport

logger = logging.getLogger(__name__)

MatrixStep = CargoInvocation | LockfileRemoval

# (argv, cwd) -> return code
CommandRunner = Callable[[list[str], Path], int]


def _manifest_arg(crate: str) -> str:
    return f"--manifest-path={crate}/Cargo.toml"


def _build_tests(config: MatrixConfig, crate: str, feature: str) -> CargoInvocation:
    return CargoInvocation(
        argv=[config.cargo_bin, "build", "--tests", _manifest_arg(crate), feature],
        crate=crate,
        feature=feature,
    )


def _plan_build(config: MatrixConfig) -> list[MatrixStep]:
    steps: list[MatrixStep] = []
    for feature in config.feature_flags:
        for crate in config.crates:
            if crate == INTEGRATION_CRATE and feature != NO_DEFAULT_FEATURES:
                argv = [config.cargo_bin, "build", "--tests", _manifest_arg(crate)]
                argv.extend(config.build_mode.split())
                argv.append(f"{feature},integration")
                steps.append(CargoInvocation(argv=argv, crate=crate, feature=feature))
            steps.append(_build_tests(config, crate, feature))
    return steps


def _plan_clean(config: MatrixConfig) -> list[MatrixStep]:
    steps: list[MatrixStep] = []
    for crate in config.crates:
        steps.append(
            CargoInvocation(
                argv=[config.cargo_bin, "clean", _manifest_arg(crate)],
                crate=crate,
            )
        )
        steps.append(LockfileRemoval(path=Path(crate) / "Cargo.lock", crate=crate))
    return steps


def _plan_lint(config: MatrixConfig) -> list[MatrixStep]:
    steps: list[MatrixStep] = []
    for feature in config.feature_flags:
        for crate in config.crates:
            steps.append(
                CargoInvocation(
                    argv=[config.cargo_bin, "fmt", _manifest_arg(crate), "--", "--check"],
                    crate=crate,
                    feature=feature,
                )
            )
            steps.append(
                CargoInvocation(
                    argv=[
                        config.cargo_bin, "clippy", _manifest_arg(crate), feature,
                        "--", "-D", "warnings",
                    ],
                    crate=crate,
                    feature=feature,
                )
            )
    return steps


def _plan_test(config: MatrixConfig) -> list[MatrixStep]:
    steps: list[MatrixStep] = []
    for feature in config.feature_flags:
        for crate in config.crates:
            steps.append(_build_tests(config, crate, feature))
            steps.append(
                CargoInvocation(
                    argv=[config.cargo_bin, "test", _manifest_arg(crate), feature],
                    crate=crate,
                    feature=feature,
                )
            )
    return steps


_PLANNERS: dict[MatrixTask, Callable[[MatrixConfig], list[MatrixStep]]] = {
    MatrixTask.BUILD: _plan_build,
    MatrixTask.CLEAN: _plan_clean,
    MatrixTask.LINT: _plan_lint,
    MatrixTask.TEST: _plan_test,
}


def plan_task(task: MatrixTask, config: MatrixConfig | None = None) -> list[MatrixStep]:
    """Return the ordered steps ``task`` would run."""
    return _PLANNERS[task](config or MatrixConfig())


def subprocess_runner(argv: list[str], cwd: Path) -> int:
    """Run a command inheriting stdio; return its exit code."""
    try:
        return subprocess.run(argv, cwd=cwd, check=False).returncode
    except FileNotFoundError:
        logger.error("Executable not found: %s", argv[0])
        return 127


class MatrixRunner:
    """Executes matrix task plans in a workspace.

    Parameters
    ----------
    root:
        Workspace root; commands run with this as the working directory.
    config:
        Crates, feature flags and cargo settings.
    runner:
        Callable executing one command.  Defaults to ``subprocess_runner``.
    console:
        Rich Console for echoing commands and banners.
    """

    def __init__(
        self,
        root: Path,
        config: MatrixConfig | None = None,
        runner: CommandRunner | None = None,
        console: Console | None = None,
    ) -> None:
        self._root = Path(root)
        self._config = config or MatrixConfig()
        self._runner = runner or subprocess_runner
        self.console = console or Console()

    def plan(self, task: MatrixTask) -> list[MatrixStep]:
        return plan_task(task, self._config)

    def run(
        self,
        task: MatrixTask,
        *,
        version_checker: VersionChecker | None = None,
    ) -> VersionReport | None:
        """Execute every step of ``task``.

        For LINT the version check runs first and a failure raises its
        ``VersionCheckError`` before any cargo command.  Returns the
        version report for LINT, None otherwise.

        Raises CommandFailedError on the first non-zero exit.
        """
        report: VersionReport | None = None
        if task == MatrixTask.LINT:
            checker = version_checker or VersionChecker(self._root)
            report = checker.check(strict=True)
            self.console.print(report.message, soft_wrap=True, highlight=False, markup=False)

        for step in self.plan(task):
            self.console.print(f"[bold]{escape(step.display)}[/bold]", soft_wrap=True)
            if isinstance(step, LockfileRemoval):
                (self._root / step.path).unlink(missing_ok=True)
                continue

            logger.debug("Running %s in %s", step.argv, self._root)
            returncode = self._runner(step.argv, self._root)
            if returncode != 0:
                raise CommandFailedError(step.display, returncode)

        banner = SUCCESS_BANNERS.get(task)
        if banner:
            self.console.print()
            self.console.print(f"[bold bright_green]{banner}[/bold bright_green]")
            self.console.print()
        return report
