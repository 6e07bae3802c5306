# Services package init
"""
GymCMS Backend — Services Layer
=================================

Service Inventory:
    - Repository (+ one subclass per entity family): list/get/create/update/delete
    - VisibilityPolicy: what an anonymous caller may see
    - CredentialService: login, token verification, password change
    - ActivityJournal: append-only audit trail
    - SettingsService: key/value upserts and active bulletins
    - StorageService / ImageProcessor / MediaService: the media library
    - SchemaManager: table creation and default data
"""
