"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DirectorySettings(BaseSettings):
    """LDAP directory connection settings.

    Environment variables:
        USERMANAGER_LDAP_URL: Directory URL (default: ldap://localhost:389)
        USERMANAGER_LDAP_SYSTEM_USER: DN used for system operations
        USERMANAGER_LDAP_SYSTEM_PASSWORD: Password for the system DN
        USERMANAGER_LDAP_CONNECT_TIMEOUT: Seconds to wait for a socket (default: 10)
        USERMANAGER_LDAP_RECEIVE_TIMEOUT: Seconds to wait for a response (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="USERMANAGER_LDAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = Field(default="ldap://localhost:389", description="Directory URL")
    system_user: str | None = Field(
        default="cn=admin,dc=example",
        description="DN of the system account",
    )
    system_password: SecretStr = Field(
        default=SecretStr(""),
        description="Password of the system account",
    )
    connect_timeout: int = Field(
        default=10,
        description="Socket connect timeout in seconds",
        ge=1,
        le=300,
    )
    receive_timeout: int = Field(
        default=10,
        description="Response receive timeout in seconds",
        ge=1,
        le=300,
    )


class MappingSettings(BaseSettings):
    """Entity to directory mapping tables.

    Each table maps a key to a comma-separated list, mirroring how the
    tables are written in deployment configuration. Values are given as
    JSON objects in the environment.

    Environment variables:
        USERMANAGER_MAPPING_OBJECT_CLASSES: entity name -> object classes
        USERMANAGER_MAPPING_ATTRIBUTE_MAPPING: "<entity>.<property>" -> attribute names
        USERMANAGER_MAPPING_SUBTREES: entity name -> base DN
    """

    model_config = SettingsConfigDict(
        env_prefix="USERMANAGER_MAPPING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    object_classes: dict[str, str] = Field(
        default={
            "user": "top,person,organizationalPerson,inetOrgPerson",
            "role": "top,groupOfNames",
        },
        description="Object classes tagged on created entries",
    )
    attribute_mapping: dict[str, str] = Field(
        default={
            "user.identifier": "uid",
            "user.display_name": "displayName",
            "user.first_name": "givenName",
            "user.last_name": "sn",
            "user.mail": "mail",
            "user.password": "userPassword",
            "role.identifier": "cn",
            "role.display_name": "description",
            "role.users": "member",
        },
        description="Property to attribute name mapping",
    )
    subtrees: dict[str, str] = Field(
        default={
            "user": "ou=users,dc=example",
            "role": "ou=roles,dc=example",
        },
        description="Base DN per entity",
    )

    @field_validator("object_classes", "attribute_mapping")
    @classmethod
    def validate_non_empty_lists(cls, value: dict[str, str]) -> dict[str, str]:
        """Every entry must name at least one value."""
        for key, names in value.items():
            if not [name for name in names.split(",") if name.strip()]:
                raise ValueError(f"Mapping for '{key}' must name at least one value")
        return value


class SecuritySettings(BaseSettings):
    """Permission resolution settings.

    Environment variables:
        USERMANAGER_SECURITY_ROLE_PERMISSIONS_FILE: role -> permissions file
        USERMANAGER_SECURITY_USER_PERMISSIONS_FILE: per-user permission templates
    """

    model_config = SettingsConfigDict(
        env_prefix="USERMANAGER_SECURITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    role_permissions_file: Path | None = Field(
        default=None,
        description="Properties file mapping role names to permissions",
    )
    user_permissions_file: Path | None = Field(
        default=None,
        description="Permission templates granted to every authenticated user",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="User Manager", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def directory(self) -> DirectorySettings:
        """Get directory connection settings."""
        return get_directory_settings()

    @property
    def mapping(self) -> MappingSettings:
        """Get mapping table settings."""
        return get_mapping_settings()

    @property
    def security(self) -> SecuritySettings:
        """Get permission resolution settings."""
        return get_security_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_directory_settings() -> DirectorySettings:
    """Get cached directory settings."""
    return DirectorySettings()


@lru_cache
def get_mapping_settings() -> MappingSettings:
    """Get cached mapping settings."""
    return MappingSettings()


@lru_cache
def get_security_settings() -> SecuritySettings:
    """Get cached security settings."""
    return SecuritySettings()
