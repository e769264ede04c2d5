'''Base error classes shared by the election modules.

Every rejection of an election call is a subclass of :class:`ElectionError`.
The concrete errors live next to the objects that raise them:
:class:`~voteflow.phase.WrongPhase` in the :mod:`phase` module, the
authorization errors and participant validation errors in the
:mod:`participant` module and the proposal validation errors in the
:mod:`proposal` module.

None of the errors signals corrupted state: an election call that raises
leaves the election exactly as it was before the call.
'''


class ElectionError(Exception):
    '''A call to an election was rejected.'''
    pass


class AuthorizationError(ElectionError):
    '''The caller does not hold the role required by the call.'''
    pass


class ValidationError(ElectionError):
    '''A well-formed call would violate an election data invariant.'''
    pass
