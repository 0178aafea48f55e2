"""Editable seed data and fixed labels."""

from __future__ import annotations

NOT_LINKED_LABEL = "Not linked"
UNKNOWN_FORM_LABEL = "Unknown form"
UNNAMED_FORM_LABEL = "Unnamed form"
DEFAULT_BUNDLE_NAME = "formulaires_de_commande"

CSV_HEADER: tuple[str, ...] = ("input", "output", "text_fr", "price")
LEGACY_CSV_HEADER: tuple[str, ...] = ("input", "output", "text_ar", "text_fr", "text_en", "price")

FORM_TYPE_LABELS: dict[str, str] = {
    "accueil": "Welcome",
    "menu": "Menu",
    "personnalise": "Custom",
    "nourriture": "Food",
    "supplements": "Add-ons",
    "boissons": "Drinks",
    "gratins": "Gratins",
}

# Seed values consumed by order_forms.data (which wraps these into model instances).
# Every seeded section is a default section and cannot be deleted.
SEED_SECTIONS: list[dict[str, object]] = [
    {
        "id": "bienvenue",
        "name": "Bienvenue",
        "forms": [
            {
                "id": "accueil",
                "name": "Message de bienvenue",
                "type": "accueil",
                "company_name": "[Nom de l'entreprise]",
                "main_question": "Bienvenue ! Comment puis-je vous aider ?",
                "questions": [
                    {"text_fr": "Commander maintenant", "linked_form": "menu"},
                    {"text_fr": "Heures d'ouverture"},
                    {"text_fr": "Notre emplacement"},
                ],
            },
        ],
    },
    {
        "id": "menu",
        "name": "Menu",
        "forms": [
            {
                "id": "menu",
                "name": "Menu",
                "type": "menu",
                "main_question": "Que voulez-vous commander ?",
                "questions": [
                    {"text_fr": "Pizza"},
                    {"text_fr": "Tacos"},
                    {"text_fr": "Sandwiches"},
                ],
            },
        ],
    },
    {"id": "nourriture", "name": "Nourriture", "forms": []},
    {"id": "supplements", "name": "Suppléments", "forms": []},
    {"id": "boissons", "name": "Boissons", "forms": []},
    {"id": "gratins", "name": "Gratins", "forms": []},
]

INITIAL_SECTION_ID = "bienvenue"
INITIAL_FORM_ID = "accueil"

# Seed section ids of version 1 snapshots, which did not store isDefault.
LEGACY_DEFAULT_SECTION_IDS: frozenset[str] = frozenset(
    {"default", "menu", "nourriture", "supplements", "boissons", "personnalise"}
)
