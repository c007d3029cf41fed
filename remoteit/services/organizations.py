"""Organization Service - Owned organization and memberships"""

from .. import operations


class OrganizationService:
    """Organization service"""

    def __init__(self, client):
        self.client = client

    def get_owned(self):
        """
        The organization owned by the current user

        It may not exist. Organizations are created in the remote.it web UI.
        """
        return self.client.execute(operations.get_owned_organization())

    def get_self_membership(self):
        """Organizations the current user is a member of"""
        return self.client.execute(operations.get_organization_self_membership())
