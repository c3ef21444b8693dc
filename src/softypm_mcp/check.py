"""Connection check for the SoftYPM MCP server configuration.

Run ``softypm-mcp-check`` after setting SOFTYPM_BASE_URL / SOFTYPM_API_TOKEN
(and optionally DEFAULT_PROJECT_ID) to verify the server will work.
"""
import asyncio
import sys
from typing import TextIO

from softypm_core.config import Settings, get_settings
from softypm_core.models import status_label

from .client import SoftYPMClient
from .errors import SoftYPMError
from .server import configure_logging


async def run_check(client: SoftYPMClient, settings: Settings, out: TextIO = sys.stdout) -> bool:
    """Probe health, then project and story access when a default project is set.

    Returns True when every attempted step passed.
    """
    print("🧪 Testing SoftYPM MCP Server Connection...\n", file=out)

    print("1️⃣ Testing health check...", file=out)
    healthy = await client.health_check()
    print(f"   Health check: {'PASS' if healthy else 'FAIL'}\n", file=out)
    if not healthy:
        print("❌ Health check failed. Please verify your API token and base URL.\n", file=out)
        return False

    project_id = settings.default_project_id
    if project_id is None:
        print("2️⃣ Skipping project tests (no DEFAULT_PROJECT_ID set)\n", file=out)
    else:
        print("2️⃣ Testing project access...", file=out)
        try:
            project = await client.get_project(project_id)
            print("   ✅ Project access: PASS", file=out)
            print(f"   📊 Project: {project.name} (ID: {project.id})\n", file=out)

            print("3️⃣ Testing story retrieval...", file=out)
            stories = await client.get_project_stories(project_id)
            print("   ✅ Story retrieval: PASS", file=out)
            print(f"   📋 Found {len(stories)} stories\n", file=out)
        except SoftYPMError as e:
            print(f"   ❌ Project access: FAIL - {e}\n", file=out)
            return False

        if stories:
            print("📋 **Sample Stories:**", file=out)
            for story in stories[:3]:
                print(f"   • #{story.id}: {story.name} [{status_label(story.status)}]", file=out)
            print("", file=out)

    print("✅ **Connection Test Complete**", file=out)
    print("\nThe MCP server should work correctly with these settings.", file=out)
    return True


async def _main(settings: Settings) -> bool:
    async with SoftYPMClient.from_settings(settings) as client:
        return await run_check(client, settings)


def main() -> int:
    """Console entry point; exit code 0 when the check passes."""
    settings = get_settings()
    configure_logging("WARNING")
    ok = asyncio.run(_main(settings))
    if not ok:
        print("Please check:", file=sys.stderr)
        print("- Your API token is correct", file=sys.stderr)
        print("- The base URL is accessible", file=sys.stderr)
        print("- Your network connection\n", file=sys.stderr)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
