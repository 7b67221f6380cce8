"""Locate the worker runtime and automation script.

Resolution walks an ordered list of rules and stops at the first one whose
script exists. The bundled distribution next to the application always wins
over override and development layouts.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from hiworks_commute.worker.errors import RuntimeNotFoundError, ScriptNotFoundError
from hiworks_commute.worker.platform import (
    Platform,
    get_app_home,
    get_executable_dir,
    get_platform,
    runtime_executable_name,
    well_known_runtime_paths,
)

logger = logging.getLogger(__name__)

SCRIPT_NAME = "playwright-worker.js"
BUNDLE_DIR_NAME = "worker"
SCRIPT_ENV_VAR = "HIWORKS_WORKER_SCRIPT"
BROWSERS_ENV_VAR = "PLAYWRIGHT_BROWSERS_PATH"


@dataclass
class ResolutionRule:
    """One candidate location for the automation script."""

    name: str
    script: Path
    working_dir: Path
    bundled: bool = False


@dataclass
class ResolvedWorker:
    """Everything needed to launch the worker process."""

    runtime: Path
    script: Path
    working_dir: Path
    rule: str
    env: dict[str, str] = field(default_factory=dict)

    @property
    def command(self) -> list[str]:
        """Argument vector for the worker process."""
        return [str(self.runtime), str(self.script)]


class PathResolver:
    """Resolve worker locations for bundled, override, dev and per-user layouts."""

    def __init__(
        self,
        executable_dir: Optional[Path] = None,
        cwd: Optional[Path] = None,
        home: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        runtime_override: Optional[Path] = None,
        script_override: Optional[Path] = None,
        runtime_search_paths: Optional[Sequence[Path]] = None,
        plat: Optional[Platform] = None,
    ):
        """Initialize path resolver.

        Args:
            executable_dir: Directory of the running application (default: detected)
            cwd: Working directory for development candidates (default: current)
            home: User home directory (default: Path.home())
            environ: Environment to read overrides from (default: os.environ)
            runtime_override: Runtime executable configured by the user
            script_override: Script path configured by the user
            runtime_search_paths: System locations checked for the runtime
            plat: Platform used for executable naming (default: detected)
        """
        self.plat = plat or get_platform()
        self.executable_dir = executable_dir or get_executable_dir()
        self.cwd = cwd or Path.cwd()
        self.home = home or Path.home()
        self.environ = environ if environ is not None else os.environ
        self.runtime_override = runtime_override
        self.script_override = script_override
        if runtime_search_paths is None:
            runtime_search_paths = well_known_runtime_paths(self.plat)
        self.runtime_search_paths = list(runtime_search_paths)

    @classmethod
    def from_config(cls, config: Any, **kwargs: Any) -> "PathResolver":
        """Create a resolver using overrides from a ConfigManager.

        Args:
            config: Configuration manager
            **kwargs: Extra resolver arguments

        Returns:
            PathResolver instance
        """
        script = config.get("worker.script")
        runtime = config.get("worker.runtime")
        return cls(
            script_override=Path(script).expanduser() if script else None,
            runtime_override=Path(runtime).expanduser() if runtime else None,
            **kwargs,
        )

    @property
    def bundle_dir(self) -> Path:
        """Directory of the bundled distribution."""
        return self.executable_dir / BUNDLE_DIR_NAME

    @property
    def bundled_runtime(self) -> Path:
        """Runtime executable inside the bundled distribution."""
        return self.bundle_dir / runtime_executable_name(self.plat)

    def rules(self) -> list[ResolutionRule]:
        """Get script candidates in resolution order.

        Returns:
            Ordered list of rules, first match wins
        """
        bundle = self.bundle_dir
        rules = [
            ResolutionRule("bundled", bundle / "scripts" / SCRIPT_NAME, bundle, bundled=True),
        ]

        env_script = self.environ.get(SCRIPT_ENV_VAR)
        if env_script:
            path = Path(env_script)
            rules.append(ResolutionRule("env-override", path, path.parent.parent))

        if self.script_override:
            path = self.script_override
            rules.append(ResolutionRule("config-override", path, path.parent.parent))

        exe_dir = self.executable_dir
        rules.extend(
            [
                ResolutionRule(
                    "dev-parent", self.cwd / ".." / "scripts" / SCRIPT_NAME, self.cwd / ".."
                ),
                ResolutionRule("dev-cwd", self.cwd / "scripts" / SCRIPT_NAME, self.cwd),
                ResolutionRule(
                    "dev-resources",
                    exe_dir / ".." / "Resources" / "scripts" / SCRIPT_NAME,
                    exe_dir / ".." / "Resources",
                ),
                ResolutionRule("dev-exe", exe_dir / "scripts" / SCRIPT_NAME, exe_dir),
            ]
        )

        app_home = get_app_home(self.home)
        rules.append(ResolutionRule("user-home", app_home / "scripts" / SCRIPT_NAME, app_home))
        return rules

    def match(self) -> ResolutionRule:
        """Find the first rule whose script exists.

        Returns:
            Matching rule with canonical paths

        Raises:
            ScriptNotFoundError: If no candidate script exists
        """
        rules = self.rules()
        for rule in rules:
            if rule.script.is_file():
                matched = ResolutionRule(
                    name=rule.name,
                    script=rule.script.resolve(strict=True),
                    working_dir=rule.working_dir.resolve(strict=True),
                    bundled=rule.bundled,
                )
                logger.debug(f"Worker script matched rule '{rule.name}': {matched.script}")
                return matched

        raise ScriptNotFoundError([rule.script for rule in rules])

    def resolve_runtime(self, rule: Optional[ResolutionRule] = None) -> Path:
        """Find the runtime executable.

        Args:
            rule: Matched script rule; a bundled match prefers the bundled runtime

        Returns:
            Canonical path to the runtime executable

        Raises:
            RuntimeNotFoundError: If no runtime could be found
        """
        tried: list[Path] = []
        candidates: list[Path] = []

        if rule is not None and rule.bundled:
            candidates.append(self.bundled_runtime)
        if self.runtime_override:
            candidates.append(self.runtime_override)

        for candidate in candidates:
            tried.append(candidate)
            if candidate.is_file():
                return candidate.resolve(strict=True)

        name = runtime_executable_name(self.plat)
        on_path = shutil.which(name, path=self.environ.get("PATH"))
        if on_path:
            return Path(on_path).resolve(strict=True)
        tried.append(Path(name))

        for candidate in self.runtime_search_paths:
            tried.append(candidate)
            if candidate.is_file():
                return candidate.resolve(strict=True)

        raise RuntimeNotFoundError(tried)

    def resolve(self) -> ResolvedWorker:
        """Resolve the script, working directory, runtime and child environment.

        Returns:
            Resolved worker launch description

        Raises:
            ScriptNotFoundError: If no candidate script exists
            RuntimeNotFoundError: If no runtime executable exists
        """
        rule = self.match()
        runtime = self.resolve_runtime(rule)

        env: dict[str, str] = {}
        if rule.bundled:
            browsers = self.bundle_dir / "browsers"
            if browsers.is_dir():
                env[BROWSERS_ENV_VAR] = str(browsers.resolve())

        resolved = ResolvedWorker(
            runtime=runtime,
            script=rule.script,
            working_dir=rule.working_dir,
            rule=rule.name,
            env=env,
        )
        logger.info(f"Resolved worker via '{rule.name}': {runtime} {rule.script}")
        return resolved
