import os
import sys
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError
from dotenv import load_dotenv

# Add the project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from config import BOT_ROLE_POSITION
from src.models import RoleRef
from src.services.firebase_utils import set_global_config, set_role_position
from src.services.role_service import RoleService


def get_clearance_positions(usergroups, role_service):
    """Map clearance user groups to positions, most senior highest"""
    codes = role_service.get_role_hierarchy()
    positions = {}
    for usergroup in usergroups:
        code = role_service.resolve(RoleRef(id=usergroup["id"], name=usergroup.get("name", "")))
        if code is None:
            continue
        positions[usergroup["id"]] = (usergroup["name"], len(codes) - role_service.registry.rank(code))
    return positions

def setup_roles(client):
    """Seed role positions in the database for existing clearance user groups"""
    role_service = RoleService()
    try:
        usergroups = client.usergroups_list()["usergroups"]
    except SlackApiError as e:
        print(f"Error listing user groups: {e.response['error']}")
        return {}

    positions = get_clearance_positions(usergroups, role_service)
    for role_id, (name, position) in positions.items():
        set_role_position(role_id, name, position)
        print(f"Set position {position} for {name}")

    skipped = len(usergroups) - len(positions)
    if skipped:
        print(f"Skipped {skipped} user groups without a clearance code")
    return positions

def main():
    # Load environment variables
    load_dotenv()

    # Initialize Slack client
    client = WebClient(token=os.getenv("SLACK_BOT_TOKEN"))

    print("Setting up Clearance bot...")

    print("\nSeeding clearance role positions...")
    positions = setup_roles(client)

    bot_position = BOT_ROLE_POSITION or len(RoleService().get_role_hierarchy()) + 1
    set_global_config({"bot_role_position": bot_position})
    print(f"Bot role position set to {bot_position}")

    print(f"\nSetup complete! {len(positions)} clearance roles ready. You can now:")
    print("1. Add the /grant and /revoke commands to your Slack app")
    print("2. Start the bot with 'python app.py'")

if __name__ == "__main__":
    main()
