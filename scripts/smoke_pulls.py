"""Quick script to exercise both pull request surfaces against GitHub."""

import asyncio

from ghpulls import GitHubClient, ObservableGitHubClient
from ghpulls.services.github.models import ApiOptions, PullRequestRequest


async def main():
    # Replace with a real public repo you can access
    owner = "fastapi"
    repo = "fastapi"

    async with GitHubClient() as client:
        try:
            prs = await client.pull_request.get_all_for_repository(
                owner, repo, PullRequestRequest(state="all"), ApiOptions(page_size=5, page_count=1)
            )
            print(f"✓ Fetched {len(prs)} pull requests")
            if prs:
                pr = prs[0]
                print(f"  PR #{pr.number}: {pr.title} ({pr.state.value})")
                merged = await client.pull_request.merged(owner, repo, pr.number)
                print(f"  Merged: {merged}")
                files = await client.pull_request.files(owner, repo, pr.number)
                print(f"  Files changed: {len(files)}")
        except Exception as e:
            print(f"✗ Error: {e}")

    async with ObservableGitHubClient() as client:
        stream = client.pull_request.get_all_for_repository(owner, repo)
        async for pr in stream:
            print(f"✓ First streamed PR #{pr.number}: {pr.title}")
            break


if __name__ == "__main__":
    asyncio.run(main())
