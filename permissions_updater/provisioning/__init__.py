from permissions_updater.provisioning.crypto import encrypt_secret
from permissions_updater.provisioning.provisioner import CredentialProvisioner, ProvisioningReport, read_cd_index

__all__ = [
    "CredentialProvisioner",
    "ProvisioningReport",
    "encrypt_secret",
    "read_cd_index",
]
