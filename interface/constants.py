"""Interface-level constants for the todos CLI/TUI."""

from typing import Dict

LANG_PACK: Dict[str, Dict[str, str]] = {
    "en": {
        "APP_TITLE": "todos",
        "NEW_TODO_PLACEHOLDER": "What needs to be done?",
        "ITEMS_LEFT": "{count} items left",
        "FILTER_ALL": "All",
        "FILTER_ACTIVE": "Active",
        "FILTER_COMPLETED": "Completed",
        "CLEAR_COMPLETED": "Clear completed",
        "LOADING": "Loading…",
        "EMPTY_LIST": "Nothing to do",
        "USER_WARNING": "Set a user id first: todos config --set-user-id <ID>",
        "HINTS": "a add · space toggle · d delete · e rename · t toggle all · f filter · c clear · x hide error · q quit",
        "HINTS_EDIT": "enter save · esc cancel",
        "ERR_LOAD": "Unable to load todos",
        "ERR_EMPTY": "Title should not be empty",
        "ERR_ADD": "Unable to add a todo",
        "ERR_DELETE": "Unable to delete a todo",
        "ERR_UPDATE": "Unable to update a todo",
        "CONFIG_SAVED": "Configuration saved",
    },
    "ru": {
        "APP_TITLE": "задачи",
        "NEW_TODO_PLACEHOLDER": "Что нужно сделать?",
        "ITEMS_LEFT": "Осталось: {count}",
        "FILTER_ALL": "Все",
        "FILTER_ACTIVE": "Активные",
        "FILTER_COMPLETED": "Выполненные",
        "CLEAR_COMPLETED": "Удалить выполненные",
        "LOADING": "Загрузка…",
        "EMPTY_LIST": "Задач нет",
        "USER_WARNING": "Сначала укажите id пользователя: todos config --set-user-id <ID>",
        "HINTS": "a добавить · space отметить · d удалить · e переименовать · t отметить все · f фильтр · c очистить · x скрыть ошибку · q выход",
        "HINTS_EDIT": "enter сохранить · esc отмена",
        "ERR_LOAD": "Не удалось загрузить задачи",
        "ERR_EMPTY": "Название не может быть пустым",
        "ERR_ADD": "Не удалось добавить задачу",
        "ERR_DELETE": "Не удалось удалить задачу",
        "ERR_UPDATE": "Не удалось обновить задачу",
        "CONFIG_SAVED": "Настройки сохранены",
    },
}
