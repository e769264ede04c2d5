'''Election notifications and the append-only event log.

Every successful mutating call to an election emits exactly one
notification:

-   :class:`ParticipantRegistered` when the administrator registers an
    account,
-   :class:`PhaseChanged` when the election moves to the next phase (also
    on tally),
-   :class:`ProposalSubmitted` when a participant submits a proposal,
-   :class:`VoteCast` when a participant votes.

Rejected calls and reads emit nothing.

Notifications are appended to an :class:`EventLog` and then handed to its
subscribers. Delivery is fire and forget: the election never waits for,
retries or depends on a subscriber, and a subscriber raising an exception
only gets the exception logged.
'''

import collections
import dataclasses
import logging
from typing import (
    Any, Callable, ClassVar, Deque, Iterator, List, Tuple, Type,
)

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Event:
    '''Base class for election notifications.'''
    name: ClassVar[str] = NotImplemented

    @property
    def args(self) -> Tuple[Any, ...]:
        '''Values of the notification fields, in declaration order.'''
        return tuple(
            getattr(self, field.name) for field in dataclasses.fields(self)
        )

    def __str__(self) -> str:
        return f'{self.name}({", ".join(repr(arg) for arg in self.args)})'


@dataclasses.dataclass(frozen=True)
class ParticipantRegistered(Event):
    '''An account was registered as a participant.'''
    name: ClassVar[str] = 'ParticipantRegistered'
    account: Any


@dataclasses.dataclass(frozen=True)
class PhaseChanged(Event):
    '''The election moved from one phase to the next.

    Phases are reported by their numeric identifiers (0 to 5).
    '''
    name: ClassVar[str] = 'PhaseChanged'
    previous: int
    next: int


@dataclasses.dataclass(frozen=True)
class ProposalSubmitted(Event):
    '''A proposal was appended at the given index.'''
    name: ClassVar[str] = 'ProposalSubmitted'
    index: int


@dataclasses.dataclass(frozen=True)
class VoteCast(Event):
    '''A participant voted for the proposal at the given index.'''
    name: ClassVar[str] = 'VoteCast'
    voter: Any
    index: int


Subscriber = Callable[[Event], Any]


class EventLog:
    '''An append-only log of election notifications.

    Subscribers are called with every event emitted after they subscribe,
    in subscription order.
    '''
    def __init__(self):
        self._events: List[Event] = []
        self._subscribers: List[Subscriber] = []
        self._pending: Deque[Event] = collections.deque()
        self._delivering = False

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        '''Stop delivering events to the subscriber.

        :raises ValueError: If the subscriber is not subscribed.
        '''
        self._subscribers.remove(subscriber)

    def append(self, event: Event) -> None:
        '''Record the event without delivering it.'''
        self._events.append(event)

    def deliver(self, event: Event) -> None:
        '''Queue the event for the subscribers and drain the queue.

        Events emitted by a subscriber while another event is being
        delivered are only queued; the outermost call delivers them after
        every subscriber has received the earlier events. Exceptions raised
        by subscribers are logged and otherwise ignored.
        '''
        self._pending.append(event)
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._pending:
                self._deliver_one(self._pending.popleft())
        finally:
            self._delivering = False

    def _deliver_one(self, event: Event) -> None:
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.exception('subscriber %r failed on %s',
                                 subscriber, event)

    def emit(self, event: Event) -> None:
        '''Record the event and deliver it to the subscribers.'''
        self.append(event)
        self.deliver(event)

    def of_type(self, event_type: Type[Event]) -> List[Event]:
        '''Return all recorded events of the given type, in order.'''
        return [event for event in self._events
                if isinstance(event, event_type)]

    def __getitem__(self, index: int) -> Event:
        return self._events[index]

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)
