"""
Infinite scroll component wrapper for react-infinite-scroll-component.

The component calls ``next`` when the user scrolls to the bottom of its
children. Views pass ``State.load_more(State.last_key)`` so the server can
ignore reports about a row that is no longer the last one.
"""

import reflex as rx


class InfiniteScroll(rx.NoSSRComponent):
    """Wrapper for react-infinite-scroll-component."""

    library = "react-infinite-scroll-component@6.1.0"
    tag = "InfiniteScroll"
    is_default = True

    data_length: rx.Var[int]
    next: rx.EventHandler[rx.event.no_args_event_spec]
    has_more: rx.Var[bool]

    loader: rx.Component | None = None
    end_message: rx.Component | None = None
    scroll_threshold: rx.Var[float] = 0.9
    scrollable_target: rx.Var[str]
