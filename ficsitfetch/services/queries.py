"""
GraphQL 查询语句

ficsit.app 只有一个查询入口，所有操作都通过不同的查询语句区分。
"""

from ficsitfetch.models.config import PAGE_LIMIT


_VERSION_FIELDS = """
            mod_id,
            version,
            sml_version,
            changelog,
            downloads,
            stability,
            link
"""

_AUTHOR_FIELDS = """
            mod_id,
            user
            {
              username,
              avatar
            },
            role
"""

GET_MOD_DOWNLOAD_LINK = """
query($modID: ModID!, $version: String!){
  getMod(modId: $modID)
  {
    version(version: $version)
    {
      link
    }
  }
}
"""

GET_AVAILABLE_MODS = f"""
{{
  getMods(filter: {{
    limit: {PAGE_LIMIT}
  }})
  {{
    mods
    {{
      name,
      short_description,
      full_description,
      id,
      logo,
      source_url,
      views,
      downloads,
      hotness,
      popularity,
      last_version_date,
      authors
      {{{_AUTHOR_FIELDS}      }},
      versions
      {{{_VERSION_FIELDS}      }}
    }}
  }}
}}
"""

GET_MOD = f"""
query($modID: ModID!){{
  getMod(modId: $modID)
  {{
    name,
    short_description,
    full_description,
    id,
    logo,
    source_url,
    views,
    downloads,
    hotness,
    popularity,
    last_version_date,
    authors
    {{{_AUTHOR_FIELDS}    }},
    versions
    {{{_VERSION_FIELDS}    }}
  }}
}}
"""

GET_MOD_VERSIONS = f"""
query($modID: ModID!){{
  getMod(modId: $modID)
  {{
    name,
    id,
    versions(filter: {{
      limit: {PAGE_LIMIT}
    }})
    {{{_VERSION_FIELDS}    }}
  }}
}}
"""

GET_SML_VERSIONS = f"""
{{
  getSMLVersions(filter: {{limit: {PAGE_LIMIT}}})
  {{
    sml_versions
    {{
      id,
      version,
      satisfactory_version,
      stability,
      link,
      changelog,
      date,
      bootstrap_version
    }}
  }}
}}
"""

GET_BOOTSTRAPPER_VERSIONS = f"""
{{
  getBootstrapVersions(filter: {{limit: {PAGE_LIMIT}}})
  {{
    bootstrap_versions
    {{
      id,
      version,
      satisfactory_version,
      stability,
      link,
      changelog,
      date
    }}
  }}
}}
"""
