# Services package init
"""
Hospeda Backend — Services Layer
=================================

What:  Permission-checked business logic between routes (HTTP) and
       repositories (persistence).
How:   Every entity service extends BaseCrudService and returns a
       ServiceOutput from each public operation; routes turn that into the
       HTTP envelope.

Service Inventory:
    - BaseCrudService / SluggedCrudService: generic CRUD orchestration
    - UserService
    - TagService: tags plus tag ↔ entity associations
    - DestinationService, AccommodationService, EventService, PostService
    - ClientService, SubscriptionService, InvoiceService
"""
