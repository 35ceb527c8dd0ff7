import argparse
import sys

import flet as ft

from quizdeck.app import StudyApp
from quizdeck.config import configure_logging, load_config
from quizdeck.deck_io import read_study_sets
from quizdeck.study_set import sample_study_set


def parse_args(argv):
    parser = argparse.ArgumentParser(description="Study flashcard sets in three modes.")
    parser.add_argument("decks", nargs="*", help="Excel, CSV or JSON files holding study sets")
    parser.add_argument("--config", help="Path to a session config JSON file")
    return parser.parse_args(argv)


def build_main(study_sets, config):
    def main(page: ft.Page):
        page.title = "QuizDeck"
        page.window.width = 1100
        page.window.height = 780
        page.window.center()
        page.horizontal_alignment = ft.CrossAxisAlignment.CENTER
        page.padding = 30

        app = StudyApp(page, study_sets, config)
        page.on_keyboard_event = app.on_key
        page.add(app)

    return main


if __name__ == "__main__":
    args = parse_args(sys.argv[1:])
    config = load_config(args.config)
    configure_logging(config.environment)

    study_sets = []
    for path in args.decks:
        study_sets.extend(read_study_sets(path))
    if not study_sets:
        study_sets = [sample_study_set()]

    ft.app(target=build_main(study_sets, config))
