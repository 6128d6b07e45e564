# Routes package init
"""
Mnemosyne Backend — API Routes Package
========================================

Route Inventory:
    - auth.py:        /api/auth/*         register, login, refresh, logout, me
    - quotes.py:      /api/quotes/*       query, CRUD, likes, following feed
    - collections.py: /api/collections/*  owner-scoped collections
    - follows.py:     /api/follows/*      social graph
    - activity.py:    /api/activity/*     activity feeds
    - categories.py:  /api/categories/*   static taxonomy
    - users.py:       /api/users/*        directory, profiles, stats, likes
    - health.py:      /health             service health check

Routes stay thin: parse the request, call one service, wrap the result in
the ApiResponse envelope. Business rules live in services.
"""
