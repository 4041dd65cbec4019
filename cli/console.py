"""Console UI for sentence scramble."""

from cli.api_client import ScrambleAPIClient


def parse_order(text: str, units: list[dict]) -> list[str] | None:
    """Turn '3 1 2' (1-based positions) into the ordered unit texts.

    Returns None when the input is not a permutation of the units.
    """
    parts = text.replace(',', ' ').split()
    try:
        positions = [int(p) - 1 for p in parts]
    except ValueError:
        return None
    if sorted(positions) != list(range(len(units))):
        return None
    return [units[p]['text'] for p in positions]


class ConsoleUI:
    """Console user interface for playing a shared assignment."""

    def __init__(self, client: ScrambleAPIClient, link: str):
        self.client = client
        self.link = link

    def print_units(self, data: dict):
        """Print the scrambled units, numbered."""
        mode = 'chunks' if data['chunk_mode'] else 'words'
        print('\n' + '=' * 60)
        print(f'Sentence {data["index"] + 1}/{data["total"]} ({mode})')
        print('=' * 60)
        for i, unit in enumerate(data['units'], start=1):
            print(f'  {i:>2}. {unit["text"]}')
        print('=' * 60)

    def print_outcome(self, result: dict):
        if result.get('message'):
            print(result['message'])
        if result['finished']:
            print(f'Attempts used: {result["attempts"]}')

    def print_summary(self, summary: dict):
        """Print the session summary."""
        print('\n' + '=' * 50)
        print('SUMMARY')
        print('=' * 50)
        print(f'Sentences: {summary["total"]}')
        print(f'Solved within limit: {summary["solvedWithinMax"]}')
        print(f'First try: {summary["firstTry"]}')
        print(f'Reveals: {summary["reveals"]}')
        print(f'Average attempts: {summary["avgAttempts"]}')
        print('=' * 50 + '\n')

    def run(self, restart: bool = False):
        """Run the main application loop."""
        try:
            health = self.client.health_check()
            print(f"Connected to sentence scramble server ({health['service']})")
        except Exception as e:
            print(f"Error: Cannot connect to server at {self.client.base_url}: {e}")
            print("Make sure the server is running: python run_server.py")
            return

        try:
            assignment = self.client.parse_assignment(self.link)
        except Exception as e:
            print(f"Error: This link does not contain a valid assignment ({e})")
            return

        if restart:
            self.client.reset_progress(self.link)

        total = len(assignment['sentences'])
        progress = self.client.get_progress(self.link)
        index = len(progress['results']) if progress else 0
        if progress and index:
            print(f"Resuming: {index}/{total} sentences done")

        print(f'\n{assignment["title"]}')
        print('Type the numbers in the right order, e.g. "3 1 2".')
        print('Commands: "reveal" to see the answer, "status" for progress, "exit" to quit\n')

        summary = progress['summary'] if progress else None
        while index < total:
            data = self.client.get_units(self.link, index)
            if data['recorded']:
                index += 1
                continue
            self.print_units(data)

            result = None
            while result is None:
                user_input = input('==> ').strip()

                if user_input.lower() == 'exit':
                    print('Goodbye!')
                    return

                elif user_input.lower() == 'status':
                    if summary:
                        self.print_summary(summary)
                    else:
                        print('No results yet.')

                elif user_input.lower() == 'reveal':
                    result = self.client.reveal(self.link, index)
                    self.print_outcome(result)

                elif user_input == '':
                    self.print_units(data)

                else:
                    answer = parse_order(user_input, data['units'])
                    if answer is None:
                        print(f'Please use each number from 1 to {len(data["units"])} exactly once.')
                        continue
                    outcome = self.client.check(self.link, index, answer)
                    self.print_outcome(outcome)
                    summary = outcome['summary']
                    if outcome['finished']:
                        result = outcome

            summary = result['summary']
            next_index = result['next_index']
            if next_index is None:
                break
            index = next_index

        if summary:
            self.print_summary(summary)
        print('All done! Send your results to your teacher.')
