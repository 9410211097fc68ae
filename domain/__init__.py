"""Picks a random recipe whenever the trigger checkbox in Notion is ticked.

Everything the poller knows lives in three Notion blocks:

- the trigger, a to-do whose checkbox starts a cycle,
- the selection, a paragraph mentioning the current recipe,
- the filter list, whose to-do children restrict the pick by tag.

Notion is slow and rate limited so recipes, the database schema and the
filter list are kept in short lived caches.
"""
