from pydantic import BaseModel, ConfigDict


class RepositoryPublicKey(BaseModel):
    """Public key used to encrypt a repository's Actions secrets."""

    model_config = ConfigDict(frozen=True)

    key_id: str
    key: str


class EncryptedSecret(BaseModel):
    """Request body of the secrets API."""

    model_config = ConfigDict(frozen=True)

    encrypted_value: str
    key_id: str
