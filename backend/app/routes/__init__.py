"""
Grievance Portal Backend — Routes Package
==========================================

Route Inventory:
    - messages.py:  POST/PATCH/DELETE /api/message
    - persons.py:   GET/POST/DELETE   /api/person,  GET /api/share/{slug}
    - share.py:     GET               /share/{slug}  (HTML)
    - health.py:    GET               /health

Routes stay thin: pull values out of the request, call a service, shape the
response. Ownership and validation rules live in app.services.
"""
