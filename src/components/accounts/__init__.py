"""
Accounts component.

Fan signup/login/verification and creator profile management.
"""

from .component import (
    get_creator,
    list_creators,
    load_config_from_rules,
    run_create_creator,
    run_login,
    run_signup,
    run_update_creator,
    run_verify_email,
)
from .models import (
    AccountsConfig,
    CreateCreatorInput,
    CreatorOutput,
    LoginInput,
    LoginOutput,
    SignupInput,
    SignupOutput,
    UpdateCreatorInput,
    Upload,
)
from .ports import AccountsRepoPort, AuthAdapterPort, UploadStorePort

__all__ = [
    # Functions
    "get_creator",
    "list_creators",
    "load_config_from_rules",
    "run_create_creator",
    "run_login",
    "run_signup",
    "run_update_creator",
    "run_verify_email",
    # Models
    "AccountsConfig",
    "CreateCreatorInput",
    "CreatorOutput",
    "LoginInput",
    "LoginOutput",
    "SignupInput",
    "SignupOutput",
    "UpdateCreatorInput",
    "Upload",
    # Ports
    "AccountsRepoPort",
    "AuthAdapterPort",
    "UploadStorePort",
]
