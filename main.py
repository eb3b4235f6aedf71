import sys
import threading
import time

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from config.config import get_config
from models.errors import SearchError
from models.search import SearchOutcome
from tools.search import SearchService, create_search_service_from_env


def show_loading_animation(stop_event: threading.Event) -> None:
    """
    Show a loading animation in the console.

    Args:
        stop_event: A threading.Event that will be set to stop the animation
    """
    while not stop_event.is_set():
        for char in '|/-\\':
            if stop_event.is_set():
                break
            sys.stdout.write(f'\r\033[93mSearching {char}\033[0m')
            sys.stdout.flush()
            time.sleep(0.1)

    # Clear the loading line
    sys.stdout.write('\r' + ' ' * 20 + '\r')
    sys.stdout.flush()


def format_outcome(outcome: SearchOutcome) -> str:
    """Render a search outcome for the terminal."""
    lines = [f"\n{outcome.summary}"]

    if outcome.profile:
        profile = outcome.profile
        lines.append("\n=== Profile ===")
        for label, value in (
            ("Name", profile.name),
            ("Title", profile.title),
            ("Company", profile.company),
            ("Bio", profile.bio),
        ):
            if value:
                lines.append(f"{label}: {value}")
        if profile.skills:
            lines.append(f"Skills: {', '.join(profile.skills)}")
        for key, url in profile.links.to_dict().items():
            lines.append(f"{key.capitalize()}: {url}")

    if outcome.results:
        lines.append("\n=== Results ===")
        for i, result in enumerate(outcome.results, 1):
            lines.append(f"{i}. {result.title} [{result.source.value}]")
            lines.append(f"   {result.url}")
            if result.snippet:
                lines.append(f"   {result.snippet[:200]}")

    return "\n".join(lines) + "\n"


def run_search(service: SearchService, query: str) -> None:
    stop_animation = threading.Event()
    loading_thread = threading.Thread(target=show_loading_animation, args=(stop_animation,))
    loading_thread.daemon = True
    loading_thread.start()

    try:
        outcome = service.search(query)
    finally:
        stop_animation.set()
        loading_thread.join()

    print(format_outcome(outcome))


def main():
    config = get_config()
    if not config.validate():
        return

    try:
        service = create_search_service_from_env(config=config)
    except ValueError as e:
        print(f"Error initializing search: {str(e)}")
        return

    print("\n=== ScoutMail Research ===")
    print("Type a query (e.g. 'who is Jane Doe'), 'help' for commands or 'exit' to quit\n")

    while True:
        try:
            user_input = input("Search: ").strip()

            if not user_input:
                continue

            if user_input.lower() in ('exit', 'quit'):
                print("\nGoodbye!")
                break

            if user_input.lower() == 'help':
                print("\n=== Available Commands ===")
                print("help        - Show this help message")
                print("clear-cache - Forget cached search results")
                print("exit/quit   - Exit the program\n")
                continue

            if user_input.lower() == 'clear-cache':
                service.cache.clear()
                print("Search cache cleared.\n")
                continue

            run_search(service, user_input)

        except KeyboardInterrupt:
            print("\nExiting...")
            break
        except SearchError as e:
            print(f"\nError: {str(e)}\n")
            continue


if __name__ == "__main__":
    main()
