"""
User-facing texts (HTML parse mode).
"""

HELP_TEXTS = {
    "admin_help": (
        "<b>📜 Лог-бот - Панель администратора</b>\n\n"
        "📂 <b>Просмотр логов:</b>\n"
        "/logs - логи (в группе: текущая группа, в личке: выбор группы)\n"
        "/userlogs &lt;id|@username&gt; - логи конкретного пользователя\n\n"
        "👤 <b>Доступ:</b>\n"
        "/grant &lt;user_id&gt; - выдать доступ\n"
        "/revoke &lt;user_id&gt; - отозвать доступ\n"
        "/grants - список выданных доступов\n\n"
        "🗑 <b>Очистка:</b>\n"
        "/wipe - очистить логи (в группе: текущая группа)\n"
        "/wipe &lt;chat_id&gt; - очистить логи группы\n"
        "/wipe all - очистить весь архив"
    ),
    "user_help": (
        "<b>📜 Лог-бот</b>\n\n"
        "✅ Вам выдан доступ к просмотру логов.\n\n"
        "/logs - логи (в группе: текущая группа, в личке: выбор группы)\n"
        "/userlogs &lt;id|@username&gt; - логи конкретного пользователя"
    ),
    "greeting": {
        "admin": "👮 Админ, я на месте! Команды готовы.",
        "authorized": "✅ Здравствуйте, у вас есть доступ. Используйте кнопки ниже для просмотра логов.",
    },
    "logs": {
        "pick_group": "Выберите группу для просмотра:",
        "no_groups": "📭 В архиве нет ни одной группы.",
        "no_visible_groups": "📭 Нет групп, в которых вы сейчас состоите.",
        "no_records": "нет записей",
        "export_empty": "📭 Нет данных для экспорта.",
        "export_started": "Формирую файл...",
        "userlogs_usage": "Используйте: <code>/userlogs &lt;id|@username&gt;</code>",
        "page_unchanged": "Больше записей нет",
    },
    "admin": {
        "grant_usage": "❌ Укажите числовой ID, например: <code>/grant 123456</code>",
        "grant_choose": "Выдача доступа для ID <code>{user_id}</code>. Выберите срок:",
        "granted": "✅ Доступ для ID <code>{user_id}</code> выдан: {duration}.",
        "granted_notify": "✅ Администратор выдал вам доступ к просмотру логов ({duration}). Напишите мне что-нибудь, чтобы открыть меню.",
        "revoke_usage": "❌ Укажите числовой ID, например: <code>/revoke 123456</code>",
        "revoked": "✅ Доступ для ID <code>{user_id}</code> отозван.",
        "revoke_missing": "ℹ️ У ID <code>{user_id}</code> не было доступа.",
        "grants_empty": "📋 Выданных доступов нет.",
        "grants_title": "📋 <b>Выданные доступы:</b>\n",
        "wipe_usage": "Используйте: <code>/wipe &lt;chat_id&gt;</code> или <code>/wipe all</code>",
        "wipe_confirm_chat": "⚠️ Удалить все логи группы <b>{title}</b> (<code>{chat_id}</code>)? Это необратимо.",
        "wipe_confirm_all": "⚠️ Удалить <b>весь</b> архив сообщений? Это необратимо.",
        "wiped": "🗑 Удалено записей: {count}.",
        "wipe_cancelled": "Отменено.",
    },
    "durations": {
        "1d": "1 день",
        "7d": "7 дней",
        "30d": "30 дней",
        "perm": "навсегда",
    },
    "alerts": {
        "userlogs": "🔔 Мониторинг: ID <code>{user_id}</code> смотрит логи {target}",
        "denied": "🔔 Попытка доступа: ID <code>{user_id}</code> (@{username}) вызвал {command}",
    },
    "errors": {
        "admin_only": "❌ Эта команда доступна только администратору.",
        "no_access": "⛔ Нет доступа.",
        "not_member": "⛔ Вы не состоите в этой группе.",
        "bad_callback": "Некорректная кнопка.",
        "generic": "❌ Операция не выполнена, попробуйте позже.",
    },
}
