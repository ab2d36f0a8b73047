"""Check registry -- discovers and loads pluggable verification checks.

A check is a Python file in the checks directory that defines:

    name = "Build Check"
    description = "What it verifies"
    parameters = [{"name": "branch", "type": "string", "required": False}]

    async def verify(issue_key, parameters):  # or a plain def, run in a worker thread
        return "ok"  # anything else is the failure reason

The file stem is the check id. Files starting with an underscore are ignored.
Checks are loaded from source on every resolve, so edits take effect
without restarting the server.
"""

from __future__ import annotations

import logging
import re
import sys
from importlib.machinery import SourceFileLoader
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path

from jira_helper.verification.errors import CheckNotFoundError, InvalidCheckError
from jira_helper.verification.models import CheckDefinition, LoadedCheck, ParameterSpec

logger = logging.getLogger(__name__)

_CHECK_ID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_-]*")
_MODULE_PREFIX = "jira_helper_checks"


class _FreshSourceLoader(SourceFileLoader):
    """Compiles straight from the .py file; bytecode caches are never read or written."""

    def get_code(self, fullname):
        return self.source_to_code(self.get_data(self.path), self.path)


def _optional_str(module, attr: str, check_id: str) -> str | None:
    value = getattr(module, attr, None)
    if value is not None and not isinstance(value, str):
        raise InvalidCheckError(check_id, f"{attr} must be a string, got {type(value).__name__}")
    return value


def load_check(path: Path) -> LoadedCheck:
    """Execute a check file from source and wrap it as a LoadedCheck.

    Raises InvalidCheckError if the file cannot be executed, lacks a
    callable verify, or declares metadata of the wrong type.
    """
    check_id = path.stem
    module_name = f"{_MODULE_PREFIX}.{check_id}"
    spec = spec_from_file_location(module_name, path, loader=_FreshSourceLoader(module_name, str(path)))
    if spec is None or spec.loader is None:
        raise InvalidCheckError(check_id, "not an importable module")
    module = module_from_spec(spec)

    # Registered only while executing so decorators like @dataclass can
    # look the module up; each resolve gets a brand new module object.
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except (Exception, SystemExit) as e:
        raise InvalidCheckError(check_id, f"{type(e).__name__}: {e}") from e
    finally:
        sys.modules.pop(module_name, None)

    verify = getattr(module, "verify", None)
    if not callable(verify):
        raise InvalidCheckError(check_id, "check does not define a verify function")

    try:
        parameter_spec = [ParameterSpec.from_dict(p) for p in getattr(module, "parameters", None) or []]
    except (KeyError, TypeError, AttributeError) as e:
        raise InvalidCheckError(check_id, f"malformed parameters: {e}") from e

    name = _optional_str(module, "name", check_id)
    description = _optional_str(module, "description", check_id)

    definition = CheckDefinition(
        id=check_id,
        name=name or check_id,
        description=description or "No description available",
        parameter_spec=parameter_spec,
    )
    return LoadedCheck(definition=definition, verify=verify)


class CheckRegistry:
    """In-memory index of the checks found in a directory."""

    def __init__(self, checks_dir: str | Path) -> None:
        self.checks_dir = Path(checks_dir)
        self._definitions: dict[str, CheckDefinition] = {}
        self.load_errors: dict[str, str] = {}

    def register(self, definition: CheckDefinition) -> None:
        """Register a definition, replacing any previous one with the same id."""
        self._definitions[definition.id] = definition
        logger.debug("Registered verification check id=%s", definition.id)

    def _candidates(self) -> list[Path]:
        if not self.checks_dir.is_dir():
            logger.warning("Checks directory %s does not exist", self.checks_dir)
            return []
        return sorted(
            p for p in self.checks_dir.glob("*.py") if p.is_file() and not p.name.startswith("_")
        )

    def list_available(self) -> list[CheckDefinition]:
        """Rescan the checks directory and return every check that loads.

        Broken checks are skipped and recorded in load_errors; this never raises.
        """
        self._definitions.clear()
        self.load_errors.clear()

        for path in self._candidates():
            try:
                loaded = load_check(path)
            except InvalidCheckError as e:
                self.load_errors[path.stem] = str(e)
                logger.warning("Skipping verification check %s: %s", path.name, e)
                continue
            self.register(loaded.definition)

        return [self._definitions[k] for k in sorted(self._definitions)]

    def resolve(self, check_id: str) -> LoadedCheck:
        """Load a check fresh from disk.

        Raises CheckNotFoundError if there is no such check, or
        InvalidCheckError if it exists but cannot be loaded.
        """
        if not check_id or not _CHECK_ID_PATTERN.fullmatch(check_id):
            raise CheckNotFoundError(check_id)

        path = self.checks_dir / f"{check_id}.py"
        if not path.is_file():
            raise CheckNotFoundError(check_id)

        loaded = load_check(path)
        self.register(loaded.definition)
        return loaded
