# ==============================================================================
# ENTITY CATALOGUE - Health & Fitness Record Types
# ==============================================================================
# Field lists are configuration data; no per-entity code exists
# ==============================================================================

from __future__ import annotations

from typing import Dict, List

from healthfit.entities.fields import FieldDescriptor, date, number, text
from healthfit.entities.registry import EntityRegistry

ENTITY_FIELDS: Dict[str, List[FieldDescriptor]] = {
    "users": [
        text("name"),
        text("email", unique=True),
        text("role"),
        text("status"),
    ],
    "contents": [
        text("title"),
        text("contentType"),
        text("author"),
        text("status"),
    ],
    "reports": [
        text("reportName"),
        text("reportType"),
        text("dateRange"),
        text("metrics"),
    ],
    "feedbacks": [
        text("userName"),
        text("feedbackType"),
        number("rating", min=1, max=5),
        text("comment"),
    ],
    "products": [
        text("productName"),
        text("category"),
        number("price"),
        number("stock"),
        text("description"),
    ],
    "activities": [
        text("activityType"),
        number("duration"),
        number("calories"),
        date("date"),
        text("notes", required=False),
    ],
    "goals": [
        text("goalName"),
        text("goalType"),
        number("targetValue"),
        number("currentValue"),
        date("deadline"),
    ],
    "workouts": [
        text("workoutName"),
        text("exercises"),
        number("duration"),
        text("difficulty"),
        text("targetMuscles"),
    ],
    "trainers": [
        text("trainerName"),
        text("specialization"),
        text("clientName"),
        text("sessionType"),
        text("schedule"),
    ],
}


def build_registry() -> EntityRegistry:
    """
    Build a registry holding the nine built-in entities.

    Each call returns a fresh, unfrozen registry.
    """
    registry = EntityRegistry()
    for name, fields in ENTITY_FIELDS.items():
        registry.register(name, fields)
    return registry
