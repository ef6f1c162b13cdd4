"""
Static and demo data for the Collections UI.

This package contains fixture data used by DemoCollectionsService for
development, testing, and demonstrations without a Supabase project.

Modules:
- demo_records: Seeded customers, invoices, payments, tickets and collectors
"""
