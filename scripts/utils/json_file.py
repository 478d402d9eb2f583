import json
import os


def load(filename, default=None):
    # loads the json content of a file
    # (error will be raised if file doesn't exist and no default is given)

    if default is not None and not os.path.exists(filename):
        return default

    with open(filename) as file:
        return json.load(file)


def save(filename, content):
    # saves the json content to a file, creating its directory

    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filename, "w") as outfile:
        json.dump(
            content,
            outfile,
            indent=2,
        )

    return filename
