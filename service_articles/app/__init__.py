"""
Articles Service package for the Edge Article Cache.

This package keeps a blog's article list and individual articles in a
key-value store and serves them without touching the content API. It
provides:

- app.main: API surface for list, by-slug and refresh-trigger endpoints.
- app.cache: Key layout, store binding, bulk writer and reader.
- app.adapters: HTTP client for the upstream content API.
- app.refresh: Refresh coordinator (fetch, then full replace).

Guidelines:
- Reads are served from the store only; a miss is final.
- Every refresh replaces the whole article set; there is no delta sync.
- Collaborators are passed in explicitly; nothing lives in module globals.
"""
