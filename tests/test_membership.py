import asyncio
from types import SimpleNamespace

import pytest

from auth.membership import MembershipGate

ADMIN_ID = 1000
CHAT_ID = -100


def oracle_returning(status, **extra):
    calls = []

    async def oracle(chat_id, user_id):
        calls.append((chat_id, user_id))
        return SimpleNamespace(status=status, **extra)

    oracle.calls = calls
    return oracle


@pytest.mark.parametrize("status", ["creator", "administrator", "member", "restricted"])
async def test_current_members_pass(auth, status):
    gate = MembershipGate(auth, oracle_returning(status))
    assert await gate.is_member(42, CHAT_ID) is True


@pytest.mark.parametrize("status", ["left", "kicked"])
async def test_departed_users_are_denied_even_with_grant(auth, status):
    await auth.authorize(42, ADMIN_ID, None)
    gate = MembershipGate(auth, oracle_returning(status))

    assert await auth.is_authorized(42) is True
    assert await gate.is_member(42, CHAT_ID) is False


async def test_restricted_user_who_left_is_denied(auth):
    gate = MembershipGate(auth, oracle_returning("restricted", is_member=False))
    assert await gate.is_member(42, CHAT_ID) is False


async def test_unknown_status_is_denied(auth):
    gate = MembershipGate(auth, oracle_returning("something_new"))
    assert await gate.is_member(42, CHAT_ID) is False


async def test_admin_bypasses_oracle(auth):
    oracle = oracle_returning("left")
    gate = MembershipGate(auth, oracle)

    assert await gate.is_member(ADMIN_ID, CHAT_ID) is True
    assert oracle.calls == []


async def test_oracle_error_fails_closed(auth):
    async def broken(chat_id, user_id):
        raise RuntimeError("Bad Request: chat not found")

    gate = MembershipGate(auth, broken)
    assert await gate.is_member(42, CHAT_ID) is False


async def test_oracle_timeout_fails_closed(auth):
    async def slow(chat_id, user_id):
        await asyncio.sleep(5)
        return SimpleNamespace(status="member")

    gate = MembershipGate(auth, slow, timeout=0.01)
    assert await gate.is_member(42, CHAT_ID) is False


async def test_filter_member_chats_keeps_order(auth):
    statuses = {-1: "member", -2: "left", -3: "administrator", -4: "kicked"}

    async def oracle(chat_id, user_id):
        return SimpleNamespace(status=statuses[chat_id])

    gate = MembershipGate(auth, oracle)
    assert await gate.filter_member_chats(42, [-1, -2, -3, -4]) == [-1, -3]
    assert await gate.filter_member_chats(ADMIN_ID, [-1, -2, -3, -4]) == [-1, -2, -3, -4]


async def test_filter_member_chats_bounds_parallel_checks(auth):
    active = 0
    peak = 0

    async def oracle(chat_id, user_id):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return SimpleNamespace(status="member")

    gate = MembershipGate(auth, oracle, concurrency=2)
    chat_ids = [-i for i in range(1, 8)]

    assert await gate.filter_member_chats(42, chat_ids) == chat_ids
    assert peak == 2
