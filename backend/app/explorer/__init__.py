"""
Explorer - the client-side data layer behind the list, map, timeline and
detail pages.

It reconciles the three independently fetched collections (periods,
sub-periods, events), derives per-item presentation attributes from
identifiers, filters and searches the joined result and builds the view
models the page renderers consume.
"""
