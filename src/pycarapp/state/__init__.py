"""View state layer.

This package holds the pages the client can show and the mutable view state
the :class:`~pycarapp.view.ViewStateMachine` owns.
"""
