"""Job file loader with strict validation.

A job file describes one invocation in YAML:

    version: "1"
    command: ["echo", "foo"]
    env: {FOO: bar}
    cwd: build
    stdin: "input text"
    log_command: true
    output: [stdout_trimmed, status]
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from cradle.exceptions import JobValidationError, ValidationError
from cradle.inputs import CurrentDir, LogCommand, SetVar, Stdin
from cradle.outputs import Output, Shape


@dataclass
class Job:
    """A validated job file, ready to be turned into cmd() inputs."""
    command: List[str]
    env: Dict[str, str] = field(default_factory=dict)
    cwd: Optional[Path] = None
    stdin: Optional[str] = None
    log_command: bool = False
    output: Shape = Output.UNIT

    def inputs(self) -> List[Any]:
        """cmd() inputs equivalent to this job."""
        inputs: List[Any] = []
        if self.log_command:
            inputs.append(LogCommand())
        inputs.append(self.command)
        for key, value in self.env.items():
            inputs.append(SetVar(key, value))
        if self.cwd is not None:
            inputs.append(CurrentDir(self.cwd))
        if self.stdin is not None:
            inputs.append(Stdin(self.stdin))
        return inputs


class JobLoader:
    """Loads and validates job YAML files."""

    SUPPORTED_VERSIONS = {"1"}
    KNOWN_FIELDS = {'version', 'command', 'env', 'cwd', 'stdin', 'log_command', 'output'}

    def __init__(self):
        self.errors: List[ValidationError] = []

    def load(self, job_path: Path) -> Job:
        """Load and validate a job file. Relative cwd values resolve against the file's directory."""
        self.errors = []
        try:
            with open(job_path, 'r') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            self._add_error(f"Failed to parse job file: {e}")
            self._raise_validation_errors(job_path)

        return self.parse(data, base_dir=Path(job_path).parent, source=job_path)

    def parse(self, data: Any, base_dir: Optional[Path] = None, source: Optional[Path] = None) -> Job:
        """Validate an already-parsed job document."""
        self.errors = []
        if data is None or not isinstance(data, dict):
            self._add_error("Job must be a YAML object/dictionary")
            self._raise_validation_errors(source)

        version = data.get('version')
        if version is None:
            self._add_error("'version' field is required")
        elif not isinstance(version, str):
            self._add_error(f"'version' field must be a string, got {type(version).__name__}")
        elif version not in self.SUPPORTED_VERSIONS:
            self._add_error(f"Unsupported version '{version}'. Supported: {sorted(self.SUPPORTED_VERSIONS)}")

        for key in data.keys():
            if key not in self.KNOWN_FIELDS:
                self._add_error(f"Unknown field '{key}'", path=str(key))

        command = self._validate_command(data.get('command'))
        env = self._validate_env(data.get('env', {}))
        cwd = self._validate_cwd(data.get('cwd'), base_dir)

        stdin = data.get('stdin')
        if stdin is not None and not isinstance(stdin, str):
            self._add_error("'stdin' must be a string", path='stdin')

        log_command = data.get('log_command', False)
        if not isinstance(log_command, bool):
            self._add_error("'log_command' must be a boolean", path='log_command')

        output = self._validate_output(data.get('output', Output.UNIT.value))

        if self.errors:
            self._raise_validation_errors(source)

        return Job(
            command=command,
            env=env,
            cwd=cwd,
            stdin=stdin,
            log_command=log_command,
            output=output,
        )

    def _validate_command(self, command: Any) -> List[str]:
        """Commands are either an argv list or a string split on whitespace."""
        if command is None:
            self._add_error("'command' field is required", path='command')
            return []
        if isinstance(command, str):
            words = command.split()
            if not words:
                self._add_error("'command' must not be empty", path='command')
            return words
        if not isinstance(command, list):
            self._add_error("'command' must be a list or a string", path='command')
            return []
        if not command:
            self._add_error("'command' must not be empty", path='command')
        for i, token in enumerate(command):
            if not isinstance(token, str):
                self._add_error(f"'command[{i}]' must be a string", path=f'command[{i}]')
        return [str(token) for token in command]

    def _validate_env(self, env: Any) -> Dict[str, str]:
        if not isinstance(env, dict):
            self._add_error("'env' must be a dictionary", path='env')
            return {}
        validated = {}
        for key, value in env.items():
            if not isinstance(key, str) or not key:
                self._add_error(f"'env' key {key!r} must be a non-empty string", path='env')
            elif not isinstance(value, str):
                self._add_error(f"'env.{key}' must be a string, got {type(value).__name__}", path=f'env.{key}')
            else:
                validated[key] = value
        return validated

    def _validate_cwd(self, cwd: Any, base_dir: Optional[Path]) -> Optional[Path]:
        if cwd is None:
            return None
        if not isinstance(cwd, str) or not cwd:
            self._add_error("'cwd' must be a non-empty string", path='cwd')
            return None
        path = Path(cwd)
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        return path

    def _validate_output(self, output: Any) -> Shape:
        names = output if isinstance(output, list) else [output]
        shapes: List[Output] = []
        valid = {member.value for member in Output}
        for i, name in enumerate(names):
            if not isinstance(name, str) or name not in valid:
                self._add_error(
                    f"Unknown output {name!r}. Expected one of: {sorted(valid)}",
                    path='output' if not isinstance(output, list) else f'output[{i}]',
                )
            else:
                shapes.append(Output(name))
        if isinstance(output, list):
            return tuple(shapes)
        return shapes[0] if shapes else Output.UNIT

    def _add_error(self, message: str, path: str = "", exit_code: int = 2):
        """Add validation error."""
        self.errors.append(ValidationError(message, path, exit_code))

    def _raise_validation_errors(self, source: Optional[Path] = None):
        """Raise JobValidationError with accumulated errors."""
        raise JobValidationError(self.errors, str(source) if source else None)

