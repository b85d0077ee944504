"""depfetch: look up npm packages and print normalized metadata as JSON."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, List, Optional

from args import parse_args
from cache.package_cache import FilePackageCache, MemoryPackageCache
from common.errors import ExternalHostError
from common.logging_utils import configure_logging
from constants import Constants, ExitCodes, load_config
from registry.npm.client import NpmDatasource
from registry.npm.npmrc import NpmrcResolver

logger = logging.getLogger(__name__)


def load_package_list(path: str) -> List[str]:
    """Read package names from a file, one per line; '#' starts a comment."""
    with open(path, "r", encoding="utf-8") as fh:
        names = []
        for line in fh:
            name = line.split("#", 1)[0].strip()
            if name:
                names.append(name)
        return names


def build_datasource(args) -> NpmDatasource:
    """Create the run-scoped datasource from parsed CLI arguments."""
    if args.NO_PERSISTENT_CACHE:
        package_cache = MemoryPackageCache()
    else:
        package_cache = FilePackageCache(args.CACHE_DIR or Constants.CACHE_DIR)
    return NpmDatasource(
        resolver=NpmrcResolver.from_file(args.NPMRC),
        package_cache=package_cache,
        cache_minutes=args.CACHE_MINUTES,
    )


def run(packages: List[str], datasource: NpmDatasource) -> Dict[str, Optional[Dict[str, Any]]]:
    """Look up each package once; the run cache is reset afterwards."""
    results: Dict[str, Optional[Dict[str, Any]]] = {}
    try:
        for name in packages:
            dep = datasource.get_dependency(name)
            if dep is None:
                logger.info("Package not found: %s", name)
                results[name] = None
            else:
                results[name] = dep.to_dict()
    finally:
        datasource.reset_cache()
    return results


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)
    load_config(args.CONFIG)

    if args.SINGLE:
        packages = list(args.SINGLE)
    else:
        try:
            packages = load_package_list(args.LIST_FROM_FILE)
        except OSError as e:
            logging.error("Couldn't read package list: %s", e)
            return ExitCodes.FILE_ERROR.value

    datasource = build_datasource(args)
    try:
        results = run(packages, datasource)
    except ExternalHostError as e:
        logging.error("Registry failure, aborting: %s", e)
        return ExitCodes.CONNECTION_ERROR.value

    payload = json.dumps(results, indent=2)
    if args.OUTPUT:
        try:
            with open(args.OUTPUT, "w", encoding="utf-8") as fh:
                fh.write(payload)
            logging.info("JSON file has been successfully exported at: %s", args.OUTPUT)
        except OSError as e:
            logging.error("JSON file couldn't be written to disk: %s", e)
            return ExitCodes.FILE_ERROR.value
    elif not args.QUIET:
        print(payload)
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
