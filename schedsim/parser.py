"""
Reader for the declarative process description.

Example input::

    processcount 2   # Read 2 processes
    runfor 15        # Run for 15 time units
    use rr
    quantum 2
    process name P1 arrival 3 burst 5
    process name P2 arrival 0 burst 9
    end

A token starting with ``#`` comments out the rest of its line and ``end``
stops reading. Process declaration order is preserved.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .errors import ConfigurationError, InputParseError
from .models import Config, Policy, Process

logger = logging.getLogger(__name__)

_PROCESS_KEYS = ("name", "arrival", "burst")


def _tokenize(text: str) -> Iterator[Tuple[int, List[str]]]:
    """Yield ``(line_number, tokens)`` for each line, comments stripped."""
    for number, line in enumerate(text.splitlines(), start=1):
        tokens = []
        for token in line.split():
            if token.startswith("#"):
                break
            tokens.append(token)
        if tokens:
            yield number, tokens


def _take(tokens: List[str], index: int, line: int, directive: str) -> str:
    if index >= len(tokens):
        raise InputParseError(f"'{directive}' is missing its value", line=line, token=directive)
    return tokens[index]


def _to_int(token: str, line: int, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise InputParseError(f"{what} must be an integer, got {token!r}", line=line, token=token) from None


def _parse_process(tokens: List[str], line: int) -> Process:
    fields: Dict[str, str] = {}
    index = 1
    while index < len(tokens):
        key = tokens[index]
        if key not in _PROCESS_KEYS:
            raise InputParseError(f"unknown process field {key!r}", line=line, token=key)
        if key in fields:
            raise InputParseError(f"process field {key!r} given twice", line=line, token=key)
        fields[key] = _take(tokens, index + 1, line, key)
        index += 2

    missing = [key for key in _PROCESS_KEYS if key not in fields]
    if missing:
        raise InputParseError(f"process is missing {', '.join(missing)}", line=line, token="process")

    return Process(
        name=fields["name"],
        arrival_time=_to_int(fields["arrival"], line, "arrival"),
        burst_time=_to_int(fields["burst"], line, "burst"),
    )


def parse_text(text: str) -> Config:
    """Parse input text into a :class:`Config`."""
    process_count: Optional[int] = None
    runtime: Optional[int] = None
    policy: Optional[Policy] = None
    quantum: Optional[int] = None
    processes: List[Process] = []

    for line, tokens in _tokenize(text):
        directive = tokens[0]
        # "end" closes the description; anything after it is ignored.
        if directive == "end":
            break

        if directive == "process":
            processes.append(_parse_process(tokens, line))
            continue

        if directive == "processcount":
            process_count = _to_int(_take(tokens, 1, line, directive), line, directive)
        elif directive == "runfor":
            runtime = _to_int(_take(tokens, 1, line, directive), line, directive)
        elif directive == "quantum":
            quantum = _to_int(_take(tokens, 1, line, directive), line, directive)
        elif directive == "use":
            value = _take(tokens, 1, line, directive)
            try:
                policy = Policy.from_token(value)
            except ConfigurationError as exc:
                raise InputParseError(str(exc), line=line, token=value) from None
        else:
            raise InputParseError(f"unknown directive {directive!r}", line=line, token=directive)

        if len(tokens) > 2:
            raise InputParseError(f"unexpected token {tokens[2]!r}", line=line, token=tokens[2])

    if runtime is None:
        raise InputParseError("missing 'runfor' directive")
    if policy is None:
        raise InputParseError("missing 'use' directive")
    if policy is Policy.RR and quantum is None:
        raise InputParseError("'use rr' requires a 'quantum' directive")

    logger.debug("Parsed %d processes, policy=%s, runfor=%d", len(processes), policy.value, runtime)
    return Config(
        policy=policy,
        runtime=runtime,
        processes=processes,
        quantum=quantum,
        process_count=process_count,
    )


def parse_file(path: Union[str, Path]) -> Config:
    """Read and parse a UTF-8 input file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InputParseError(f"{path} is not valid UTF-8 text ({exc.reason} at byte {exc.start})") from None
    return parse_text(text)
