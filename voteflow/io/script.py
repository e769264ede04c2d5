"""Operation scripts: plain text lists of election calls.

Each non-empty line holds one call in the form::

    <caller> <operation> [argument]

The caller is an account identifier without whitespace. The argument is the
rest of the line: an account for ``register`` and ``participant``, the
proposal text for ``submit`` (may contain spaces) and a proposal index for
``vote`` and ``proposal``. Everything after a ``#`` that starts a line is a
comment. For example::

    # registration
    admin register alice
    admin open_proposals
    alice submit Plant more trees
    admin close_proposals
    admin open_voting
    alice vote 1
    admin close_voting
    admin tally

Event logs are written one notification per line, e.g.
``VoteCast('alice', 1)``.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Iterable, List, Optional, Tuple

import voteflow.io.core
from voteflow.election import Election
from voteflow.event import Event

COMMENT_CHAR = '#'

ARG_NONE = 'none'
ARG_TEXT = 'text'
ARG_INDEX = 'index'

OPERATIONS: Dict[str, Tuple[str, str]] = {
    'register': ('register_participant', ARG_TEXT),
    'open_proposals': ('open_proposals', ARG_NONE),
    'submit': ('submit_proposal', ARG_TEXT),
    'close_proposals': ('close_proposals', ARG_NONE),
    'open_voting': ('open_voting', ARG_NONE),
    'vote': ('cast_vote', ARG_INDEX),
    'close_voting': ('close_voting', ARG_NONE),
    'tally': ('tally', ARG_NONE),
    'participant': ('get_participant', ARG_TEXT),
    'proposal': ('get_proposal', ARG_INDEX),
}
'''Script keyword -> (election method name, argument kind).'''


class ScriptParseError(voteflow.io.core.ParseError):
    pass


@dataclasses.dataclass(frozen=True)
class Call:
    """A single scripted election call."""
    caller: str
    operation: str
    argument: Optional[Any] = None
    line_no: Optional[int] = None

    @property
    def method_name(self) -> str:
        return OPERATIONS[self.operation][0]

    def apply(self, election: Election) -> Any:
        """Perform the call on the election and return its result.

        Election errors propagate to the caller.
        """
        method = getattr(election, self.method_name)
        if OPERATIONS[self.operation][1] == ARG_NONE:
            return method(self.caller)
        else:
            return method(self.caller, self.argument)

    def __str__(self) -> str:
        if self.argument is None:
            return f'{self.caller} {self.operation}'
        return f'{self.caller} {self.operation} {self.argument}'


def load_lines(lines: Iterable[str]) -> List[Call]:
    calls = []
    for line_no, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith(COMMENT_CHAR):
            continue
        calls.append(_parse_call(line, line_no))
    return calls


load, loads = voteflow.io.core.loaders(load_lines)


def _parse_call(line: str, line_no: int) -> Call:
    parts = line.split(None, 2)
    if len(parts) < 2:
        raise ScriptParseError(f'caller and operation expected: {line!r}',
                               line_no)
    caller, operation = parts[0], parts[1]
    raw_arg = parts[2] if len(parts) > 2 else None
    if operation not in OPERATIONS:
        raise ScriptParseError(
            f'unknown operation {operation!r}, known: '
            + ', '.join(OPERATIONS.keys()),
            line_no
        )
    arg_kind = OPERATIONS[operation][1]
    if arg_kind == ARG_NONE:
        if raw_arg is not None:
            raise ScriptParseError(f'{operation} takes no argument', line_no)
        argument = None
    elif raw_arg is None:
        raise ScriptParseError(f'{operation} requires an argument', line_no)
    elif arg_kind == ARG_INDEX:
        try:
            argument = int(raw_arg)
        except ValueError as e:
            raise ScriptParseError(
                f'proposal index must be an integer: {raw_arg!r}', line_no
            ) from e
    else:
        argument = raw_arg
    return Call(caller, operation, argument, line_no)


def dump_lines(events: Iterable[Event]) -> Iterable[str]:
    for event in events:
        yield str(event)


dump, dumps = voteflow.io.core.dumpers(dump_lines)
