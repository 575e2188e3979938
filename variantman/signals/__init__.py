"""
Variantman signals.

Signals:
    selection_changed:
        Sent after a session's selection changes (value chosen or repaired
        by a structural edit).

        Kwargs:
            sender: VariantSession class
            session: The VariantSession instance
            product_sku: str | None
            selection: dict[str, str] (the new selection)
            previous: dict[str, str] (the selection before the change)

        Example handler::

            from variantman.signals import selection_changed

            def on_selection_changed(sender, session, selection, **kwargs):
                logger.info("Selection is now %s", selection)

            selection_changed.connect(on_selection_changed)

    variant_changed:
        Sent whenever the matched variant transitions, including to and
        from None. Hosts use it to swap price display and image.

        Kwargs:
            sender: VariantSession class
            session: The VariantSession instance
            product_sku: str | None
            variant: Variant | None (the new match)
            previous: Variant | None (the old match)

    integrity_warning:
        Sent when a session opens on inconsistent data. Non-fatal.
        "DUPLICATE_VARIANT": variants share one combination; the first
        in storage order is used. "SHARED_VALUE_ID": one value id is used
        by several groups, so matching by value ids is ambiguous.

        Kwargs:
            sender: VariantSession class
            product_sku: str | None
            code: str ("DUPLICATE_VARIANT" or "SHARED_VALUE_ID")
            variant_ids: list[str] (empty for SHARED_VALUE_ID)
            value_id: str (SHARED_VALUE_ID only)
            group_ids: list[str] (SHARED_VALUE_ID only)
"""

from django.dispatch import Signal

selection_changed = Signal()
variant_changed = Signal()
integrity_warning = Signal()
