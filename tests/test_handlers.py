"""
Handler flows with the Telegram API mocked out.
"""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from telebot.types import CallbackQuery, Message

from auth.access_control import auth_service
from auth.membership import membership_gate
from config.help_texts import HELP_TEXTS
from conftest import make_record
from core.telegram import bot
from handlers import admin_commands, commands, callbacks as callback_handlers
from logs.browser import log_browser
from storage.base import StorageFailure

ADMIN_ID = 1000
USER_ID = 42


def make_call(data, user_id=ADMIN_ID):
    return CallbackQuery.de_json({
        "id": "cb1",
        "from": {"id": user_id, "is_bot": False, "first_name": "Tester", "username": "tester"},
        "chat_instance": "ci",
        "data": data,
        "message": {
            "message_id": 5,
            "date": 1767225600,
            "chat": {"id": user_id, "type": "private"},
            "text": "old",
        },
    })


def make_command(text, user_id=ADMIN_ID, chat_id=None, chat_type="private"):
    return Message.de_json({
        "message_id": 10,
        "date": 1767225600,
        "from": {"id": user_id, "is_bot": False, "first_name": "Tester", "username": "tester"},
        "chat": {"id": chat_id if chat_id is not None else user_id, "type": chat_type},
        "text": text,
    })


@pytest.fixture(autouse=True)
def wired(monkeypatch, store, archive, clock):
    """Point module-level services at the test database and mock the Bot API"""
    monkeypatch.setattr(auth_service, "store", store)
    monkeypatch.setattr(auth_service, "clock", clock)
    monkeypatch.setattr(log_browser, "archive", archive)
    monkeypatch.setattr(callback_handlers, "archive", archive)
    monkeypatch.setattr(admin_commands, "archive", archive)
    monkeypatch.setattr(commands, "archive", archive)

    for name in ("answer_callback_query", "edit_message_text", "send_message", "reply_to", "send_document"):
        monkeypatch.setattr(bot, name, AsyncMock())
    monkeypatch.setattr(membership_gate, "oracle", AsyncMock(return_value=SimpleNamespace(status="member")))


def set_membership(monkeypatch, status):
    async def oracle(chat_id, user_id):
        return SimpleNamespace(status=status)
    monkeypatch.setattr(membership_gate, "oracle", oracle)


async def test_grant_button_creates_permanent_grant(store):
    await callback_handlers.on_callback(make_call(f"grant:{USER_ID}:perm"))

    grant = await store.get(USER_ID)
    assert grant.permanent is True
    assert grant.granted_by == ADMIN_ID
    bot.edit_message_text.assert_awaited_once()
    # Granted user is notified
    assert bot.send_message.await_args.args[0] == USER_ID


async def test_grant_button_time_boxed(store, clock):
    await callback_handlers.on_callback(make_call(f"grant:{USER_ID}:7d"))

    grant = await store.get(USER_ID)
    assert grant.permanent is False
    assert grant.expires_at == clock() + timedelta(days=7)


async def test_grant_button_rejected_for_non_admin(store):
    await store.upsert(USER_ID, ADMIN_ID, None, True)

    await callback_handlers.on_callback(make_call("grant:555:perm", user_id=USER_ID))

    assert await store.get(555) is None
    bot.answer_callback_query.assert_awaited_once_with("cb1", HELP_TEXTS["errors"]["admin_only"], show_alert=True)


async def test_expired_grant_blocks_paging_and_is_reclaimed(store, clock):
    await store.upsert(USER_ID, ADMIN_ID, clock() + timedelta(hours=1), False)
    clock.advance(hours=2)

    await callback_handlers.on_callback(make_call("page:group:-100:2", user_id=USER_ID))

    assert await store.get(USER_ID) is None
    bot.answer_callback_query.assert_awaited_once_with("cb1", HELP_TEXTS["errors"]["no_access"], show_alert=True)
    bot.edit_message_text.assert_not_awaited()


async def test_departed_member_cannot_page_group(monkeypatch, store, archive):
    await store.upsert(USER_ID, ADMIN_ID, None, True)
    await archive.append(make_record(1, chat_id=-100))
    set_membership(monkeypatch, "left")

    await callback_handlers.on_callback(make_call("page:group:-100:1", user_id=USER_ID))

    bot.answer_callback_query.assert_awaited_once_with("cb1", HELP_TEXTS["errors"]["not_member"], show_alert=True)
    bot.edit_message_text.assert_not_awaited()


async def test_member_pages_group(monkeypatch, store, archive):
    await store.upsert(USER_ID, ADMIN_ID, None, True)
    await archive.append(make_record(1, chat_id=-100, content="visible"))
    set_membership(monkeypatch, "member")

    await callback_handlers.on_callback(make_call("page:group:-100:1", user_id=USER_ID))

    text = bot.edit_message_text.await_args.args[0]
    assert "visible" in text


async def test_export_sends_document(archive):
    await archive.append(make_record(1, chat_id=-100, content="exported"))

    await callback_handlers.on_callback(make_call("export:group:-100"))

    bot.send_document.assert_awaited_once()
    assert bot.send_document.await_args.kwargs["visible_file_name"] == "log_group_-100.txt"


async def test_export_of_empty_scope_says_no_data():
    await callback_handlers.on_callback(make_call("export:user:nobody"))

    bot.send_document.assert_not_awaited()
    bot.answer_callback_query.assert_awaited_once_with("cb1", HELP_TEXTS["logs"]["export_empty"], show_alert=True)


async def test_wipe_button_deletes_chat(archive):
    await archive.append(make_record(1, chat_id=-100))
    await archive.append(make_record(2, chat_id=-200))

    await callback_handlers.on_callback(make_call("wipe:-100"))

    assert await archive.count() == 1
    assert "1" in bot.edit_message_text.await_args.args[0]


async def test_malformed_callback_is_rejected():
    await callback_handlers.on_callback(make_call("page:group:oops:1"))

    bot.answer_callback_query.assert_awaited_once_with("cb1", HELP_TEXTS["errors"]["bad_callback"], show_alert=True)


async def test_storage_failure_reports_generic_error(monkeypatch):
    broken = AsyncMock()
    broken.get.side_effect = StorageFailure("get grant", RuntimeError("db down"))
    monkeypatch.setattr(auth_service, "store", broken)

    await callback_handlers.on_callback(make_call("page:group:-100:1", user_id=USER_ID))

    bot.answer_callback_query.assert_awaited_once_with("cb1", HELP_TEXTS["errors"]["generic"], show_alert=True)


async def test_revoke_rejects_malformed_id(store):
    await store.upsert(USER_ID, ADMIN_ID, None, True)

    await admin_commands.revoke_access(make_command("/revoke abc"))

    assert await store.get(USER_ID) is not None
    assert bot.reply_to.await_args.args[1] == HELP_TEXTS["admin"]["revoke_usage"]


async def test_revoke_command(store):
    await store.upsert(USER_ID, ADMIN_ID, None, True)

    await admin_commands.revoke_access(make_command(f"/revoke {USER_ID}"))

    assert await store.get(USER_ID) is None


async def test_admin_command_denied_for_authorized_user(store):
    await store.upsert(USER_ID, ADMIN_ID, None, True)

    await admin_commands.revoke_access(make_command(f"/revoke {USER_ID}", user_id=USER_ID))

    assert await store.get(USER_ID) is not None
    assert bot.reply_to.await_args.args[1] == HELP_TEXTS["errors"]["admin_only"]
    # Admin gets an alert about the attempt
    assert bot.send_message.await_args.args[0] == ADMIN_ID


async def test_grant_command_puts_target_in_buttons():
    await admin_commands.grant_access(make_command("/grant 777"))

    markup = bot.reply_to.await_args.kwargs["reply_markup"]
    payloads = [button.callback_data for button in markup.keyboard[0]]
    assert payloads == ["grant:777:1d", "grant:777:7d", "grant:777:30d", "grant:777:perm"]


async def test_help_depends_on_role(store):
    await commands.send_welcome(make_command("/help"))
    assert bot.reply_to.await_args.args[1] == HELP_TEXTS["admin_help"]

    await store.upsert(USER_ID, ADMIN_ID, None, True)
    await commands.send_welcome(make_command("/help", user_id=USER_ID))
    assert bot.reply_to.await_args.args[1] == HELP_TEXTS["user_help"]

    await commands.send_welcome(make_command("/help", user_id=555))
    assert bot.reply_to.await_args.args[1] == HELP_TEXTS["errors"]["no_access"]


async def test_logs_in_private_offers_group_picker(archive):
    await archive.append(make_record(1, chat_id=-100, chat_title="Alpha"))
    await archive.append(make_record(2, chat_id=-200, chat_title="Beta"))

    await commands.show_logs(make_command("/logs"))

    markup = bot.reply_to.await_args.kwargs["reply_markup"]
    payloads = [row[0].callback_data for row in markup.keyboard]
    assert payloads == ["view:-100", "view:-200"]


async def test_logs_picker_hides_groups_user_left(monkeypatch, store, archive):
    await store.upsert(USER_ID, ADMIN_ID, None, True)
    await archive.append(make_record(1, chat_id=-100))
    set_membership(monkeypatch, "left")

    await commands.show_logs(make_command("/logs", user_id=USER_ID))

    assert bot.reply_to.await_args.args[1] == HELP_TEXTS["logs"]["no_visible_groups"]


async def test_logs_denied_without_grant():
    await commands.show_logs(make_command("/logs", user_id=555))

    bot.send_message.assert_not_awaited()


async def test_userlogs_by_viewer_alerts_admin(store, archive):
    await store.upsert(USER_ID, ADMIN_ID, None, True)
    await archive.append(make_record(1, username="Alice", content="hi"))

    await commands.show_user_logs(make_command("/userlogs @alice", user_id=USER_ID))

    recipients = [call.args[0] for call in bot.send_message.await_args_list]
    assert recipients == [ADMIN_ID, USER_ID]
    assert "hi" in bot.send_message.await_args.args[1]


async def test_userlogs_rejects_bad_handle():
    await commands.show_user_logs(make_command("/userlogs @bad-name!"))

    assert bot.reply_to.await_args.args[1] == HELP_TEXTS["logs"]["userlogs_usage"]
    bot.send_message.assert_not_awaited()


async def test_grants_lists_active_grants(store):
    await store.upsert(USER_ID, ADMIN_ID, None, True)

    await admin_commands.list_grants(make_command("/grants"))

    assert f"<code>{USER_ID}</code>" in bot.reply_to.await_args.args[1]


async def test_wipe_all_asks_for_confirmation(archive):
    await archive.append(make_record(1))

    await admin_commands.wipe_logs(make_command("/wipe all"))

    assert bot.reply_to.await_args.args[1] == HELP_TEXTS["admin"]["wipe_confirm_all"]
    assert await archive.count() == 1


async def test_wipe_in_group_targets_that_group(archive):
    await archive.append(make_record(1, chat_id=-100))

    await admin_commands.wipe_logs(make_command("/wipe", chat_id=-100, chat_type="supergroup"))

    markup = bot.reply_to.await_args.kwargs["reply_markup"]
    assert markup.keyboard[0][0].callback_data == "wipe:-100"


async def test_private_greeting_ignores_strangers(store):
    await commands.private_greeting(make_command("hello", user_id=555))
    bot.reply_to.assert_not_awaited()

    await store.upsert(USER_ID, ADMIN_ID, None, True)
    await commands.private_greeting(make_command("hello", user_id=USER_ID))
    assert bot.reply_to.await_args.args[1] == HELP_TEXTS["greeting"]["authorized"]


def set_memberships(monkeypatch, statuses):
    async def oracle(chat_id, user_id):
        return SimpleNamespace(status=statuses[chat_id])
    monkeypatch.setattr(membership_gate, "oracle", oracle)


async def test_userlogs_hides_groups_user_left(monkeypatch, store, archive):
    await store.upsert(USER_ID, ADMIN_ID, None, True)
    await archive.append(make_record(1, chat_id=-100, username="alice", content="from left group"))
    await archive.append(make_record(2, chat_id=-200, username="alice", content="from current group"))
    set_memberships(monkeypatch, {-100: "left", -200: "member"})

    await commands.show_user_logs(make_command("/userlogs @alice", user_id=USER_ID))

    text = bot.send_message.await_args.args[1]
    assert "from current group" in text
    assert "from left group" not in text


async def test_author_paging_and_export_hide_groups_user_left(monkeypatch, store, archive):
    await store.upsert(USER_ID, ADMIN_ID, None, True)
    await archive.append(make_record(1, chat_id=-100, user_id=7, content="from left group"))
    await archive.append(make_record(2, chat_id=-200, user_id=7, content="from current group"))
    set_memberships(monkeypatch, {-100: "kicked", -200: "member"})

    await callback_handlers.on_callback(make_call("page:user:7:1", user_id=USER_ID))
    text = bot.edit_message_text.await_args.args[0]
    assert "from current group" in text
    assert "from left group" not in text

    await callback_handlers.on_callback(make_call("export:user:7", user_id=USER_ID))
    document = bot.send_document.await_args.args[1].getvalue().decode("utf-8")
    assert "from current group" in document
    assert "from left group" not in document


async def test_admin_author_logs_cover_every_group(monkeypatch, archive):
    await archive.append(make_record(1, chat_id=-100, username="alice", content="first group"))
    await archive.append(make_record(2, chat_id=-200, username="alice", content="second group"))
    set_memberships(monkeypatch, {})

    await commands.show_user_logs(make_command("/userlogs @alice"))

    text = bot.send_message.await_args.args[1]
    assert "first group" in text and "second group" in text


async def test_failed_export_upload_is_reported_by_message(archive):
    await archive.append(make_record(1, chat_id=-100, content="exported"))
    bot.send_document.side_effect = RuntimeError("upload failed")

    await callback_handlers.on_callback(make_call("export:group:-100"))

    bot.answer_callback_query.assert_awaited_once_with("cb1", HELP_TEXTS["logs"]["export_started"])
    bot.send_message.assert_awaited_once_with(ADMIN_ID, HELP_TEXTS["errors"]["generic"])
