"""
tasksync: a small task tracker.

- client/: state synchronization engine (store, reducer, effects, selectors)
- server/: record storage and the /tasks API served in-process over httpx
- cli/: console entry point
"""
