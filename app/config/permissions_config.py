"""
Permissions Configuration
This config defines the permission matrix for all modules and which user
types are granted which permissions. Admins (app_metadata.type == "admin")
bypass the matrix entirely.
"""

# Define modules and their actions
MODULES = {
    "profiles": {
        "resource": "profiles",
        "actions": ["read", "update", "delete"],
        "description": "User profile management"
    },
    "projects": {
        "resource": "projects",
        "actions": ["create", "read", "update", "delete"],
        "description": "Homeowner project management"
    },
    "bid_cards": {
        "resource": "bid_cards",
        "actions": ["create", "read", "update", "delete"],
        "description": "Bid card listings published for contractors"
    },
    "bids": {
        "resource": "bids",
        "actions": ["create", "read", "review", "withdraw"],
        "description": "Contractor bids on projects"
    },
    "messages": {
        "resource": "messages",
        "actions": ["send", "read", "broadcast"],
        "description": "Project messaging between homeowners and contractors"
    },
    "aliases": {
        "resource": "aliases",
        "actions": ["read", "assign"],
        "description": "Per-project contractor display aliases"
    },
    "catalog": {
        "resource": "catalog",
        "actions": ["read"],
        "description": "Job categories, types and timeline reference data"
    }
}

# Descriptions for actions that are not plain CRUD
MODULE_SPECIFIC_PERMISSIONS = {
    "bids": {
        "review": "Accept or reject bids on owned projects",
        "withdraw": "Withdraw own pending bids"
    },
    "messages": {
        "broadcast": "Send group messages to every bidder on a project"
    },
    "aliases": {
        "assign": "Assign contractor aliases on owned projects"
    }
}

_OWNER_PERMISSIONS = [
    "profiles:read", "profiles:update", "profiles:delete",
    "projects:create", "projects:read", "projects:update", "projects:delete",
    "bid_cards:create", "bid_cards:read", "bid_cards:update", "bid_cards:delete",
    "bids:read", "bids:review",
    "messages:send", "messages:read", "messages:broadcast",
    "aliases:read", "aliases:assign",
    "catalog:read",
]

_CONTRACTOR_PERMISSIONS = [
    "profiles:read", "profiles:update", "profiles:delete",
    "projects:read",
    "bids:create", "bids:read", "bids:withdraw",
    "messages:send", "messages:read",
    "aliases:read",
    "catalog:read",
]

# User type -> granted permissions
USER_TYPE_PERMISSIONS = {
    "homeowner": _OWNER_PERMISSIONS,
    "property-manager": _OWNER_PERMISSIONS,
    "contractor": _CONTRACTOR_PERMISSIONS,
    "labor-contractor": _CONTRACTOR_PERMISSIONS,
    "admin": [],  # filled with every permission below
}

USER_TYPES = list(USER_TYPE_PERMISSIONS.keys())
CONTRACTOR_USER_TYPES = ("contractor", "labor-contractor")


def get_permission_matrix():
    """
    Returns a dictionary with all permissions and the user types granted them
    Format: {
        "permissions": [
            {"name": "projects:create", "resource": "projects", "action": "create", "description": "..."},
            ...
        ],
        "user_types": {
            "homeowner": ["projects:create", ...],
            ...
        }
    }
    """
    permissions = []
    for module_name, module_config in MODULES.items():
        resource = module_config["resource"]
        for action in module_config["actions"]:
            description = f"{action.capitalize()} {resource}"
            if module_name in MODULE_SPECIFIC_PERMISSIONS and action in MODULE_SPECIFIC_PERMISSIONS[module_name]:
                description = MODULE_SPECIFIC_PERMISSIONS[module_name][action]
            permissions.append({
                "name": f"{resource}:{action}",
                "resource": resource,
                "action": action,
                "description": description
            })

    all_names = [p["name"] for p in permissions]
    user_types = {}
    for user_type, granted in USER_TYPE_PERMISSIONS.items():
        if user_type == "admin":
            user_types[user_type] = sorted(all_names)
        else:
            user_types[user_type] = sorted(name for name in granted if name in all_names)

    return {
        "permissions": permissions,
        "user_types": user_types
    }


PERMISSION_MATRIX = get_permission_matrix()


def permissions_for_user_type(user_type):
    """Permission names granted to a user type; unknown types get none."""
    if not user_type:
        return []
    return PERMISSION_MATRIX["user_types"].get(user_type, [])
