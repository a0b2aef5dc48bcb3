#!/usr/bin/env python3
"""Test runner script for the fluentmoji build test suite"""

import os
import sys
import subprocess
import argparse
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent
TESTS_DIR = PROJECT_ROOT / 'tests'


def main():
    """Main test runner function"""
    parser = argparse.ArgumentParser(description='fluentmoji Test Runner')

    # Test selection options
    parser.add_argument('--unit', action='store_true',
                        help='Run only unit tests')
    parser.add_argument('--integration', action='store_true',
                        help='Run only integration tests (spawns worker processes)')
    parser.add_argument('--coverage', action='store_true',
                        help='Generate coverage report')
    parser.add_argument('--html-coverage', action='store_true',
                        help='Generate HTML coverage report')

    # Test filtering
    parser.add_argument('--core', action='store_true',
                        help='Test only pipeline modules')
    parser.add_argument('--common', action='store_true',
                        help='Test only common libraries')

    # Output options
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Quiet output')
    parser.add_argument('--timeout', type=int, default=300, metavar='SECONDS',
                        help='Global test timeout (default: 300s)')

    parser.add_argument('paths', nargs='*',
                        help='Specific test paths to run')

    args = parser.parse_args()

    cmd = [sys.executable, '-m', 'pytest']

    markers = []
    if args.unit:
        markers.append('unit')
    elif args.integration:
        markers.append('integration')

    if args.core:
        markers.append('core')
    elif args.common:
        markers.append('common')

    if markers:
        cmd.extend(['-m', ' and '.join(markers)])

    if args.coverage or args.html_coverage:
        cmd.append('--cov=fluentmoji')
        cmd.append('--cov-report=term')

        if args.html_coverage:
            cmd.append('--cov-report=html:tests/coverage_html')

        if args.coverage:
            cmd.append('--cov-report=xml:tests/coverage.xml')

    if args.verbose:
        cmd.append('-v')
    elif args.quiet:
        cmd.append('-q')

    cmd.extend(['--timeout', str(args.timeout)])

    if args.paths:
        cmd.extend(args.paths)
    else:
        cmd.append(str(TESTS_DIR))

    # Worker processes spawned by integration tests import the package from here
    env = os.environ.copy()
    env['PYTHONPATH'] = os.pathsep.join(p for p in [str(PROJECT_ROOT), env.get('PYTHONPATH', '')] if p)
    env['FLUENTMOJI_LOGGING_CONSOLE_LEVEL'] = 'DEBUG'

    print("Running fluentmoji Test Suite")
    print(f"Project Root: {PROJECT_ROOT}")
    print(f"Command: {' '.join(cmd)}")
    print("-" * 60)

    try:
        result = subprocess.run(cmd, env=env, cwd=str(PROJECT_ROOT))

        print("-" * 60)
        if result.returncode == 0:
            print("✅ All tests passed!")
        else:
            print("❌ Some tests failed!")
            print(f"Exit code: {result.returncode}")

        if args.html_coverage:
            coverage_path = PROJECT_ROOT / 'tests' / 'coverage_html' / 'index.html'
            print(f"📊 HTML coverage report: {coverage_path}")

        return result.returncode

    except KeyboardInterrupt:
        print("\n🛑 Test run interrupted by user")
        return 130


def check_dependencies():
    """Check if required test dependencies are available"""
    required_packages = ['pytest', 'pytest_cov', 'pytest_timeout']
    missing_packages = []

    for package in required_packages:
        try:
            __import__(package)
        except ImportError:
            missing_packages.append(package.replace('_', '-'))

    if missing_packages:
        print("❌ Missing required test dependencies:")
        for package in missing_packages:
            print(f"   - {package}")
        print("\nInstall with: pip install -e '.[test]'")
        return False

    return True


if __name__ == '__main__':
    if not check_dependencies():
        sys.exit(1)

    sys.exit(main())
