from provisioning.config import ProvisioningConfig
from provisioning.models import ProvisionResult
import sys

RULE = "━" * 51


def print_user_count(user_count: int):
    print(f"📊 Found {user_count} users in database")
    if user_count == 0:
        print("👤 No users found. Creating admin user...")


def print_user(email: str, user_id: int, created: bool):
    if created:
        print(f"✅ Created user: {email} (ID: {user_id})")
    else:
        print(f"👤 Using existing user: {email} (ID: {user_id})")


def print_api_key(result: ProvisionResult, config: ProvisioningConfig, title: str):
    """The only place the raw key is ever shown"""
    print(f"\n🎉 {title}")
    print(RULE)
    print(f"🔑 API Key: {result.prefixed_key}")
    print(f"👤 User ID: {result.user_id}")
    print(f"🆔 Key ID: {result.api_key_id}")
    print(f"📝 Note: {result.note}")
    print(f"⏰ Expires: {result.expires_at.isoformat() if result.expires_at else 'Never'}")
    print(RULE)
    print("\n📖 Usage:")
    print(f'curl -H "Authorization: Bearer {result.prefixed_key}" \\')
    print(f"     {config.usage_url}")
    print("\n⚠️  IMPORTANT: Save this API key securely - it won't be shown again!")


def print_config_error(error: Exception):
    print(f"❌ {error}", file=sys.stderr)
    print("Set it to your PostgreSQL connection string", file=sys.stderr)
