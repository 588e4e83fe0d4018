from __future__ import annotations

from typing import Dict, List

from .models import (
    ConventionEntry,
    DependencyEntry,
    FormatRuleEntry,
    PluginEntry,
    RepositoryEntry,
    Scope,
    ScopeExtensionEntry,
    TestPlatformEntry,
)

DEFAULT_GROUP = "com.wck"
DEFAULT_VERSION = "0.0.1-SNAPSHOT"
DEFAULT_UNITS = ("spring-web",)

SPRING_BOOT_VERSION = "3.0.2"
JAVA_VERSION = "17"


def builtin_properties() -> Dict[str, str]:
    return {
        "junitVersion": "5.9.2",
        "assertJVersion": "3.24.2",
    }


def builtin_conventions() -> List[ConventionEntry]:
    # Conventions of a Spring Boot multi-module build: every subproject gets
    # the same plugins, pinned dependencies, formatter and test platform.
    return [
        PluginEntry(plugin_id="java"),
        PluginEntry(plugin_id="org.springframework.boot", version=SPRING_BOOT_VERSION),
        PluginEntry(plugin_id="io.spring.dependency-management", version="1.1.0"),
        PluginEntry(plugin_id="com.diffplug.spotless", version="6.15.0"),
        RepositoryEntry(name="mavenCentral", url="https://repo.maven.apache.org/maven2/"),
        ScopeExtensionEntry(scope=Scope.COMPILE_ONLY, extends_from=Scope.ANNOTATION_PROCESSING),
        # Lombok
        DependencyEntry(coordinate="org.projectlombok:lombok", version="1.18.24", scope=Scope.COMPILE_ONLY),
        DependencyEntry(coordinate="org.projectlombok:lombok", version="1.18.24", scope=Scope.ANNOTATION_PROCESSING),
        # JUnit 5
        DependencyEntry(
            coordinate="org.assertj:assertj-core", version="${assertJVersion}", scope=Scope.TEST_IMPLEMENTATION
        ),
        DependencyEntry(
            coordinate="org.junit.jupiter:junit-jupiter-api", version="${junitVersion}", scope=Scope.TEST_IMPLEMENTATION
        ),
        DependencyEntry(
            coordinate="org.junit.jupiter:junit-jupiter-params", version="${junitVersion}", scope=Scope.TEST_COMPILE_ONLY
        ),
        DependencyEntry(
            coordinate="org.junit.jupiter:junit-jupiter-engine", version="${junitVersion}", scope=Scope.TEST_RUNTIME_ONLY
        ),
        # Spring Boot test
        DependencyEntry(
            coordinate="org.springframework.boot:spring-boot-starter-test",
            version=SPRING_BOOT_VERSION,
            scope=Scope.TEST_IMPLEMENTATION,
        ),
        FormatRuleEntry(formatter="google-java-format", version="1.15.0", target="java"),
        TestPlatformEntry(platform="junit-platform"),
    ]
