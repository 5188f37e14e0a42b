#!/usr/bin/env python3
"""
Encryption Manager

Keeps the provider API token out of the config file in plain text using
Fernet (AES-128 CBC + HMAC-SHA256).

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

import os
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from .exceptions import EncryptionError

################################################################################
# ENCRYPTION MANAGER CLASS
################################################################################

class EncryptionManager:
    """Encrypts/decrypts tokens with a Fernet key file. Key files are kept at 0o600."""

    def __init__(self, key_file_path: str, create: bool = True, logger: Optional[logging.Logger] = None) -> None:
        """Load the key file, generating it first when create=True. Raises EncryptionError."""
        self.key_file = key_file_path
        self.logger = logger if logger else logging.getLogger(__name__)
        self._cipher = self._setup_encryption(create)

    ################################################################################
    # PUBLIC METHODS - Encryption and Decryption
    ################################################################################

    def encrypt(self, data: str) -> str:
        """Encrypt a string. Returns URL-safe base64 text."""
        if not data:
            raise ValueError("Cannot encrypt empty data")
        return self._cipher.encrypt(data.encode()).decode()

    def decrypt(self, encrypted_data: str) -> str:
        """Decrypt Fernet-encrypted text. Raises EncryptionError for a wrong key or corrupt data."""
        if not encrypted_data:
            raise ValueError("Cannot decrypt empty data")
        try:
            return self._cipher.decrypt(encrypted_data.encode()).decode()
        except InvalidToken:
            raise EncryptionError(f"token cannot be decrypted with key {self.key_file}")

    ################################################################################
    # PRIVATE METHODS - Key Management
    ################################################################################

    def _setup_encryption(self, create: bool) -> Fernet:
        """Load or generate the key, enforce 0o600 permissions and build the cipher."""
        try:
            if os.path.exists(self.key_file):
                with open(self.key_file, 'rb') as f:
                    key = f.read().strip()

                current_perms = os.stat(self.key_file).st_mode & 0o777
                if current_perms != 0o600:
                    os.chmod(self.key_file, 0o600)
                    self.logger.warning(f"Fixed encryption key permissions: {self.key_file}")
            elif create:
                key = Fernet.generate_key()

                key_dir = os.path.dirname(self.key_file)
                if key_dir and not os.path.exists(key_dir):
                    os.makedirs(key_dir, mode=0o700, exist_ok=True)

                with open(self.key_file, 'wb') as f:
                    f.write(key)
                os.chmod(self.key_file, 0o600)

                self.logger.info(f"Generated new encryption key: {self.key_file}")
            else:
                raise EncryptionError(f"Encryption key file not found: {self.key_file}")
        except OSError as e:
            raise EncryptionError(f"Failed to access encryption key {self.key_file}: {e}")

        # Fernet keys are always 32 bytes URL-safe base64 (44 chars)
        if len(key) != 44:
            raise EncryptionError(f"Invalid encryption key length: {len(key)} (expected 44)")

        try:
            return Fernet(key)
        except ValueError as e:
            raise EncryptionError(f"Invalid encryption key in {self.key_file}: {e}")
