from __future__ import annotations

import asyncio
import json
import logging
import os
import pathlib
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable

from decouple import config

from knowling import helpers

import argparse

from knowling.notes.controller import NoteController
from knowling.notes.model.grouping import MonthNames
from knowling.notes.service import NoteService
from knowling.router import Router


class KnowlingCli:
    """
    Defines the functionality of the Knowling CLI.
    """

    SETTINGS = {
        'service_url': config('KNOWLING_SERVICE_URL', default='http://127.0.0.1:7700'),
        'related_threshold': 0.5,
        'month_names': 'english',
        'log_level': 'info'
    }

    #: Accepted values for settings which are limited to a set of choices
    CHOICES = {
        'month_names': ['english', 'system'],
        'log_level': ['debug', 'info', 'warning', 'critical']
    }

    LOG_LEVELS = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warning': logging.WARNING,
        'critical': logging.CRITICAL
    }

    def __init__(self, args):
        self.args = args
        self.logger = self.setup_logging()
        self.apply_settings()
        self.set_logging_level(KnowlingCli.SETTINGS['log_level'])
        self.router = Router()
        NoteController.SERVICE = NoteService(KnowlingCli.SETTINGS['service_url'])
        asyncio.run(self.run())

    async def run(self) -> None:
        """
        Run the requested command, closing the note service client afterwards.
        """
        commands = {
            'list': self.list_notes,
            'show': self.show_note,
            'save': self.save_note,
            'delete': self.delete_note,
            'related': self.related_notes
        }
        try:
            await commands[self.args.command]()
        finally:
            await NoteController.SERVICE.close()

    @staticmethod
    async def __process_return(aw: Awaitable, error: str) -> Any:
        """
        Process the return value of one of the controller methods. If there is an error, this is logged and the CLI exits.

        :param aw: The controller call to await.
        :param error: The error message to display on failure.

        :return: the data returned by the controller on success.
        """
        success, data = await aw
        if not success:
            logging.critical(error)
            sys.exit(21)
        return data

    @staticmethod
    def month_names() -> MonthNames:
        if KnowlingCli.SETTINGS['month_names'] == 'system':
            return MonthNames.system()
        return MonthNames()

    async def list_notes(self) -> None:
        groups = await KnowlingCli.__process_return(
            NoteController.get_grouped_notes(month_names=KnowlingCli.month_names()),
            "Error fetching notes.")
        for label, notes in groups.items():
            print(label)
            for note in notes:
                print('  {0}  {1}'.format(note.id, note.preview))

    async def show_note(self) -> None:
        note = await KnowlingCli.__process_return(
            NoteController.get_note(self.args.id),
            "Error fetching note {}.".format(self.args.id))
        print(helpers.markdown_to_html(note.text) if self.args.html else note.text)

    async def save_note(self) -> None:
        text = self.args.text if self.args.text != '-' else sys.stdin.read()
        note_id = await KnowlingCli.__process_return(
            NoteController.upsert_note(self.args.id, text),
            "Error saving note. The note may not have been saved.")
        if note_id:
            print(note_id)

    async def delete_note(self) -> None:
        self.router.push('EditNote', {'id': self.args.id})
        await KnowlingCli.__process_return(
            NoteController.delete_note(self.args.id, self.router),
            "Error deleting note {}.".format(self.args.id))
        logging.info('Returned to {}'.format(self.router.current))

    async def related_notes(self) -> None:
        threshold = self.args.threshold if self.args.threshold is not None else KnowlingCli.SETTINGS['related_threshold']
        related = await KnowlingCli.__process_return(
            NoteController.get_related_notes(self.args.id, float(threshold)),
            "Error fetching notes related to {}.".format(self.args.id))
        for item in related:
            print('{0:.3f}  {1}  {2}'.format(item.score, item.note.id, item.note.title))

    def apply_settings(self) -> None:
        """
        Load settings from the configuration file, This is normally in ~/.knowling/conf.json, but may be overridden
        with the --config option. Any configuration options specified via command-line options will override the values
        in the configuration file.
        """

        # Load settings from file
        if 'config' in self.args:
            # Load settings from custom configuration file
            if os.path.exists(self.args.config):
                conf_file = self.args.config
                self.logger.info('Using custom config file: {}'.format(conf_file))
            else:
                self.logger.critical('Configuration file {} not found.'.format(self.args.config))
                sys.exit(2)
        else:
            # Load settings from default configuration file
            conf_file = helpers.settings_folder() / 'conf.json'
            self.logger.info('Using default config file: {}'.format(conf_file))

        KnowlingCli.merge_settings(conf_file)

        # Override settings from command line arguments
        self.override_config()

        logging.debug("Settings in use: {}".format(json.dumps(KnowlingCli.SETTINGS, indent=2)))

    @staticmethod
    def merge_settings(conf_file: str | Path) -> None:
        """
        Override any of the default settings of the Knowling CLI with settings found in a configuration file.
        """

        if os.path.exists(conf_file):
            with open(conf_file) as fp:
                try:
                    loaded_settings = json.loads(fp.read())
                except json.decoder.JSONDecodeError:
                    logging.critical("Your configuration file at {} is invalid. Please check syntax.".format(conf_file))
                    sys.exit(20)
            if not isinstance(loaded_settings, dict):
                logging.critical("Your configuration file at {} must contain a JSON object.".format(conf_file))
                sys.exit(20)
            for key, choices in KnowlingCli.CHOICES.items():
                if key in loaded_settings and loaded_settings[key] not in choices:
                    logging.critical("Invalid {0} '{1}' in configuration file {2}. Choose from {3}.".format(
                        key, loaded_settings[key], conf_file, ', '.join(choices)))
                    sys.exit(20)
            for key in KnowlingCli.SETTINGS.keys():
                if key in loaded_settings.keys():
                    KnowlingCli.SETTINGS[key] = loaded_settings[key]

    def override_config(self) -> None:
        """
        Override any settings (default or from configuration file) which have been specified as command-line options.
        """

        vargs = vars(self.args)
        for key in KnowlingCli.SETTINGS.keys():
            if key in vargs:
                KnowlingCli.SETTINGS[key] = vargs[key]

    def setup_logging(self) -> logging.Logger:
        """
        Sets up the logging system.

        :return: the logging helper for the CLI.
        """

        if 'log_dir' in self.args:
            if os.access(self.args.log_dir, os.W_OK | os.X_OK):
                log_folder = Path(self.args.log_dir)
            else:
                print("Specified log directory {} is not accessible.".format(self.args.log_dir))
                sys.exit(1)
        else:
            log_folder = helpers.log_folder()

        log_file = datetime.now().strftime("Knowling_%Y%m%d-%H%M%S") + '.log'
        log_level = KnowlingCli.LOG_LEVELS[vars(self.args).get('log_level', KnowlingCli.SETTINGS['log_level'])]

        logging.basicConfig(
            level=log_level,
            format='%(asctime)s %(levelname)s: %(message)s',
        )
        logging.getLogger().addHandler(logging.FileHandler(log_folder / log_file))
        helpers.set_panic_hook(helpers.settings_folder())
        return logging.getLogger()

    @staticmethod
    def set_logging_level(logging_level: str) -> None:
        """
        Sets the logging level once the configuration file and command-line options are merged.

        :param logging_level: the logging level which can be `debug`, `info`, `warning` or `critical`.
        """
        logging.getLogger().setLevel(KnowlingCli.LOG_LEVELS[logging_level])


def build_parser() -> argparse.ArgumentParser:
    """
    Defines arguments accepted by the CLI.
    """

    parser = argparse.ArgumentParser(
        prog="knowling",
        description="List, edit and relate the notes held by your Knowling note service.",
    )

    # Knowling options
    parser.add_argument(
        "--service-url",
        type=str,
        default=argparse.SUPPRESS,
        help="set the address of the note service.")
    parser.add_argument(
        "--month-names",
        type=str,
        choices=['english', 'system'],
        default=argparse.SUPPRESS,
        help="use English month names, or those of the system locale, when grouping notes.")

    # Cli-specific options
    parser.add_argument(
        "--config",
        type=pathlib.Path,
        default=argparse.SUPPRESS,
        help="use to provide a path to a custom configuration file.")
    parser.add_argument(
        "--log-dir",
        type=pathlib.Path,
        default=argparse.SUPPRESS,
        help="specify a custom directory to use for logging.")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=['debug', 'info', 'critical', 'warning'],
        default=argparse.SUPPRESS,
        help="specify the logging level.")

    commands = parser.add_subparsers(dest='command', required=True)
    commands.add_parser('list', help="list notes grouped by modification date.")

    show = commands.add_parser('show', help="print a note.")
    show.add_argument("id", type=str, help="the note to print.")
    show.add_argument("--html", action='store_true', help="render the note's Markdown as HTML.")

    save = commands.add_parser('save', help="create a note, or update it if --id is given.")
    save.add_argument("text", type=str, help="the text of the note, or - to read it from standard input.")
    save.add_argument("--id", type=str, default=None, help="the note to update.")

    delete = commands.add_parser('delete', help="delete a note.")
    delete.add_argument("id", type=str, help="the note to delete.")

    related = commands.add_parser('related', help="list notes similar to a note.")
    related.add_argument("id", type=str, help="the note to compare against.")
    related.add_argument("--threshold", type=float, default=None, help="the minimum similarity score.")

    return parser


def main():
    KnowlingCli(build_parser().parse_args())


if __name__ == "__main__":
    main()
