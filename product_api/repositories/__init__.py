"""레포지토리 패키지 — DB 쿼리 계층.

One repository per model, each a BaseRepository subclass with its own
lookup queries. Module-level singletons (user_repository, product_repository)
are what services import.
"""
