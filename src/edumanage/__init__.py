"""EduManage back office package.

Organized by feature modules (users, academics, finance, publications) with a
thin Flask controller layer over services, and a storage layer that can run
against memory, a hosted Postgres (PostgREST) or MongoDB.
"""
