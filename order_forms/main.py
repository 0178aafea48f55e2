"""Entry point for the order-forms Textual app."""

from __future__ import annotations

from order_forms.editor_app import OrderFormsApp


def main() -> None:
    """Run the Textual application."""
    OrderFormsApp().run()


if __name__ == "__main__":
    main()
