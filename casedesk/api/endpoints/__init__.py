"""
API endpoints.

Modules:
- auth: login, onboarding, registration and the current user
- law_firms: tenant administration
- users: team management
- clients: the firm's clients
- cases: cases, activity feed and case events
- documents: upload, metadata, download
- notes: private notes
- invoices: billing and payment proofs
- events: calendar
- stats: statistics and the staff dashboard
- health: liveness and readiness
"""
