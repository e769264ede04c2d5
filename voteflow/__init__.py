"""Voteflow - a single-election proposal voting workflow.

Voteflow objects model a small election run by one administrator: the
administrator registers eligible participants, the participants submit
proposals and then vote for one of them, and the administrator finally
tallies the votes to find the winning proposal.

The workflow is a forward-only sequence of phases:

-   **Registration** - the administrator registers participants. Handled by
    the roll in the :mod:`participant` module.
-   **Proposal submission** - participants append proposals to the list from
    the :mod:`proposal` module, which always starts with a GENESIS sentinel.
-   **Voting** - each participant casts exactly one vote for a proposal.
-   **Tally** - the first proposal with the maximum number of votes wins, as
    computed by the :mod:`tally` module.

The :class:`Election` object from the :mod:`election` module ties all of
these together, checks the caller's role and the current :mod:`phase` on
every call, and reports each successful change to the :mod:`event` log.
Election state can be snapshotted to JSON-ready dictionaries by the
:mod:`persist` module and scripted calls can be replayed with the :mod:`io`
subpackage or from the command line (``python -m voteflow``).
"""
