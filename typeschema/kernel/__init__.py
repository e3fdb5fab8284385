"""Kernel of typeschema: domain models, ports, configuration and the schema engine.

The kernel has no knowledge of any particular host type system. Hosts plug in
through :class:`typeschema.kernel.ports.TypeIntrospector`.
"""
