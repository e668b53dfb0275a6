"""Event emission plugin: announce every operation on the engine's emitter."""

DEFAULTS = {
    "operation": False,  # Emit the operation name as event
    "key": True,         # Emit the key as event
}


def emitter(ctx):
    """Emit ``(event, envelope)`` after each operation on matching keys.

    With ``operation`` enabled the event is the method name (``"set_item"``);
    with ``key`` enabled it is the key itself.
    """
    options = {**DEFAULTS, **ctx.options}
    engine = ctx.engine

    if options["operation"]:
        def emit_operation(envelope, _options):
            if envelope.get("method"):
                engine.emit(envelope["method"], envelope)

        ctx.after(emit_operation)

    if options["key"]:
        def emit_key(envelope, _options):
            key = envelope.get("key")
            if isinstance(key, str) and key:
                engine.emit(key, envelope)

        ctx.after(emit_key)
