"""Static metadata describing QuizMe."""

APP_NAME = "QuizMe"
APP_VERSION = "0.1.0"
APP_TAGLINE = "Quiz authoring and quiz taking platform"
APP_LICENSE = "MIT License"
