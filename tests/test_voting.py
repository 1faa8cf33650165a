"""Tests for the review vote tally."""

import pytest

from study_bot.bot.services.voting import counted_votes
from study_bot.bot.services.voting import eligible_reviewers
from study_bot.bot.services.voting import has_enough_votes
from study_bot.bot.services.voting import is_submission_accepted
from study_bot.bot.services.voting import required_votes


@pytest.mark.parametrize(
    "reviewers,expected",
    [(0, 0), (1, 1), (2, 1), (3, 2), (4, 2), (5, 3), (10, 5), (11, 6)],
)
def test_required_votes_rounds_half_up(reviewers, expected):
    assert required_votes(reviewers) == expected


def test_bot_is_not_a_reviewer_or_voter():
    assert eligible_reviewers(5) == 4
    assert eligible_reviewers(0) == 0
    assert counted_votes(3) == 2
    assert counted_votes(0) == 0


def test_acceptance_is_monotonic_in_votes():
    for reviewers in range(0, 12):
        results = [has_enough_votes(votes, reviewers) for votes in range(0, 13)]
        # Once accepted, more votes never un-accept
        first = results.index(True)
        assert all(results[first:])
        assert not any(results[:first])


@pytest.mark.asyncio
async def test_is_submission_accepted_excludes_bot(gateway):
    gateway.members = 5  # 4 reviewers, 2 votes needed
    gateway.vote(42, 2)  # bot + 1 reviewer

    assert not await is_submission_accepted(gateway, 1, 42, "👍")

    gateway.vote(42)
    assert await is_submission_accepted(gateway, 1, 42, "👍")


@pytest.mark.asyncio
async def test_is_submission_accepted_propagates_errors(gateway):
    async def broken(channel_id):
        raise RuntimeError("gateway down")

    gateway.count_channel_members = broken

    with pytest.raises(RuntimeError):
        await is_submission_accepted(gateway, 1, 42, "👍")
