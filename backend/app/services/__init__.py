"""
Grievance Portal Backend — Services
====================================

Business logic between the route handlers and the ORM.

    person_service    create / list / delete Persons, share-link lookups
    message_service   anonymous submission, resolve, delete
    user_service      session user lookup and CLI provisioning
"""
