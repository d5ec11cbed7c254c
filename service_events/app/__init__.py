"""
Events service package for the Sydney Events backend.

The service fronts the single-page app, providing:
- Subscriber capture with a confirmation email per event of interest
- Unsubscribe by email
- A validated, cached proxy to the Ticketmaster discovery API

Structure:
- app.main: FastAPI app, routes, and lifecycle wiring.
- app.adapters: Ticketmaster client, subscriber stores, SMTP mailer.
- app.caching: Process-local response cache for the events proxy.
- app.domain: Query validation and subscription workflows.
- app.models: Request, response and document models.
"""
