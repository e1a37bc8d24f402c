from portal.services.setup.database_setup import DatabaseSetupService, SetupReport

__all__ = ["DatabaseSetupService", "SetupReport"]
