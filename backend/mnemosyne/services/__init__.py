# Services package init
"""
Mnemosyne Backend — Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Each service is a stateless class with a module-level singleton; every
       method receives the request's AsyncSession and returns Pydantic models
       or raises a MnemosyneError subclass.

Service Inventory:
    - QuoteService: filtering, sorting, pagination, random pick, CRUD, like enrichment
    - LikeService: like/unlike state machine per (user, quote)
    - CollectionService: owner-scoped collections and their memberships
    - FollowService: directed follow graph
    - ActivityService: activity log append, enriched feeds, retention
    - AuthService: registration, login, token refresh
    - UserService: directory, profiles, stats, liked quotes
    - CategoryService: static category taxonomy
    - permissions: the like-visibility predicate shared by all of the above
"""
