from feedstream.schemas.options import GetOptions

_SHORTCUTS = {
    "own": "with_own_reactions",
    "recent": "with_recent_reactions",
    "counts": "with_reaction_counts",
    "own_children": "with_own_children",
}


def replace_reaction_options(options: GetOptions) -> GetOptions:
    """Expand the ``reactions`` shortcut into the individual ``with_*`` flags.

    Flags the caller already set explicitly are left alone.
    """
    if options.reactions is None:
        return options
    update = {"reactions": None}
    for short, flag in _SHORTCUTS.items():
        value = getattr(options.reactions, short)
        if value is not None and getattr(options, flag) is None:
            update[flag] = value
    return options.model_copy(update=update)


def should_use_enrich_endpoint(options: GetOptions, enrich_by_default: bool = False) -> bool:
    if options.enrich is not None:
        return options.enrich
    return enrich_by_default or any(getattr(options, flag) is not None for flag in _SHORTCUTS.values())
